from flask import Blueprint, current_app, redirect, send_from_directory, url_for

public_bp = Blueprint("public", __name__)


@public_bp.route("/")
def home():
    return redirect(url_for("dashboard.panel"))


@public_bp.route("/uploads/<path:filename>")
def uploaded_file(filename):
    return send_from_directory(current_app.config["UPLOAD_FOLDER"], filename)
