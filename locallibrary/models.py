from datetime import date
from uuid import uuid4

from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()

INSTANCE_STATUSES = ('Available', 'Maintenance', 'Loaned', 'Reserved')


def new_id() -> str:
    return uuid4().hex


book_genre = db.Table(
    'book_genre',
    db.Column('book_id', db.String(32), db.ForeignKey('books.id'), primary_key=True),
    db.Column('genre_id', db.String(32), db.ForeignKey('genres.id'), primary_key=True),
)


# --- Models ---
class Author(db.Model):
    __tablename__ = 'authors'
    id = db.Column(db.String(32), primary_key=True, default=new_id)
    first_name = db.Column(db.String(100), nullable=False)
    family_name = db.Column(db.String(100), nullable=False)
    date_of_birth = db.Column(db.Date)
    date_of_death = db.Column(db.Date)

    books = db.relationship('Book', back_populates='author')

    @property
    def name(self):
        return f"{self.family_name}, {self.first_name}"

    @property
    def url(self):
        return f"/catalog/author/{self.id}"


class Genre(db.Model):
    __tablename__ = 'genres'
    id = db.Column(db.String(32), primary_key=True, default=new_id)
    name = db.Column(db.String(100), nullable=False, unique=True)

    @property
    def url(self):
        return f"/catalog/genre/{self.id}"


class Book(db.Model):
    __tablename__ = 'books'
    id = db.Column(db.String(32), primary_key=True, default=new_id)
    title = db.Column(db.String(250), nullable=False, index=True)
    author_id = db.Column(db.String(32), db.ForeignKey('authors.id'), nullable=False)
    summary = db.Column(db.Text, nullable=False)
    isbn = db.Column(db.String(50), nullable=False)

    author = db.relationship('Author', back_populates='books')
    genres = db.relationship('Genre', secondary=book_genre, order_by='Genre.name')

    @property
    def url(self):
        return f"/catalog/book/{self.id}"


class BookInstance(db.Model):
    __tablename__ = 'book_instances'
    id = db.Column(db.String(32), primary_key=True, default=new_id)
    book_id = db.Column(db.String(32), db.ForeignKey('books.id'), nullable=False, index=True)
    imprint = db.Column(db.String(250), nullable=False)
    status = db.Column(db.Enum(*INSTANCE_STATUSES, name='instance_status'), nullable=False, default='Maintenance')
    due_back = db.Column(db.Date, nullable=False, default=date.today)

    book = db.relationship('Book')

    @property
    def url(self):
        return f"/catalog/bookinstance/{self.id}"
