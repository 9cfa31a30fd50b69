from flask import Blueprint, render_template

from catalog_admin.models import Book, Category
from catalog_admin.repository import Repository

dashboard_bp = Blueprint("dashboard", __name__, url_prefix="/dashboard")


@dashboard_bp.route("/")
def panel():
    return render_template("dashboard/panel.html",
                           category_count=Repository(Category).count(),
                           book_count=Repository(Book).count())


@dashboard_bp.route("/books")
def books():
    return render_template("dashboard/books.html")


@dashboard_bp.route("/categories")
def categories():
    return render_template("dashboard/categories.html")
