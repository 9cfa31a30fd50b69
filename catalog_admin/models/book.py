from catalog_admin import db


class Book(db.Model):
    __tablename__ = "books"

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255), nullable=False)
    author = db.Column(db.String(255), nullable=False)
    publication_date = db.Column(db.Date, nullable=False)
    publisher = db.Column(db.String(255), nullable=False)
    pages = db.Column(db.Integer, nullable=False)
    image_url = db.Column(db.String(255), nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, server_default=db.func.now())
    updated_at = db.Column(db.DateTime, nullable=False, server_default=db.func.now(),
                           onupdate=db.func.now())

    category_id = db.Column(db.Integer,
                            db.ForeignKey("categories.id", ondelete="CASCADE", onupdate="CASCADE"),
                            nullable=False)
    category = db.relationship("Category", back_populates="books")

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "author": self.author,
            "publicationDate": self.publication_date.isoformat(),
            "publisher": self.publisher,
            "pages": self.pages,
            "categoryId": self.category_id,
            "imageUrl": self.image_url,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self):
        return f"<Book {self.title}>"
