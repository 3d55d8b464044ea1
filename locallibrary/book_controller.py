"""
Book pages of the catalog: home summary, list, detail, create, delete, update.

Every view fans its independent reads out through ``parallel.run`` and joins
them before rendering. Database errors propagate to the app error handler.
"""
import logging

from flask import Blueprint, redirect, render_template, request, url_for
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import joinedload, selectinload

from .errors import RecordNotFound
from .forms import BookForm, as_genre_list, escape
from .models import Author, Book, BookInstance, Genre, db
from .parallel import parallel

logger = logging.getLogger(__name__)

catalog_bp = Blueprint('catalog', __name__, url_prefix='/catalog')

# Fields escaped one by one on update
UPDATE_FIELDS = ('title', 'author', 'summary', 'isbn')


# --- Data helpers ---
def find_book(book_id):
    return db.session.get(Book, book_id, options=[joinedload(Book.author), selectinload(Book.genres)])


def find_instances(book_id):
    return BookInstance.query.filter_by(book_id=book_id).order_by(BookInstance.imprint).all()


def find_authors():
    return Author.query.order_by(Author.family_name, Author.first_name).all()


def find_genres():
    return Genre.query.order_by(Genre.name).all()


def find_genres_by_id(genre_ids):
    if not genre_ids:
        return []
    return Genre.query.filter(Genre.id.in_(genre_ids)).all()


def form_choices():
    return parallel.run({
        'authors': find_authors,
        'genres': find_genres,
    })


def submitted_genres():
    """Genre ids from the form body, passed through as a scalar when only one was sent."""
    values = request.form.getlist('genre')
    return as_genre_list(values if len(values) > 1 else request.form.get('genre'))


def checked_genre_ids(genres, selected_ids):
    selected = set(selected_ids)
    return {g.id for g in genres if g.id in selected}


def book_from_form(form, book_id=None):
    """Build an unsaved Book from the submitted form."""
    book = Book(
        title=form.title.data,
        author_id=form.author.data,
        summary=form.summary.data,
        isbn=form.isbn.data,
    )
    if book_id is not None:
        book.id = book_id
    return book


# --- Views ---
@catalog_bp.route('/')
def index():
    error = None
    try:
        data = parallel.run({
            'book_count': lambda: Book.query.count(),
            'book_instance_count': lambda: BookInstance.query.count(),
            'book_instance_available_count': lambda: BookInstance.query.filter_by(status='Available').count(),
            'author_count': lambda: Author.query.count(),
            'genre_count': lambda: Genre.query.count(),
        })
    except SQLAlchemyError as e:
        logger.exception("Could not count catalog records")
        error = e
        data = {}
    return render_template('index.html', title='Local Library Home', error=error, data=data)


@catalog_bp.route('/books')
def book_list():
    books = Book.query.options(joinedload(Book.author)).order_by(Book.title).all()
    return render_template('book_list.html', title='Book List', book_list=books)


@catalog_bp.route('/book/<book_id>')
def book_detail(book_id):
    results = parallel.run({
        'book': lambda: find_book(book_id),
        'book_instances': lambda: find_instances(book_id),
    })
    book = results['book']
    if book is None:
        raise RecordNotFound('Book not found')
    return render_template('book_detail.html', title=book.title, book=book,
                           book_instances=results['book_instances'])


@catalog_bp.route('/book/create', methods=['GET'])
def book_create_get():
    results = form_choices()
    return render_template('book_form.html', title='Create Book', authors=results['authors'],
                           genres=results['genres'], checked=set())


@catalog_bp.route('/book/create', methods=['POST'])
def book_create_post():
    genre_ids = submitted_genres()

    form = BookForm()
    valid = form.validate()
    form.escape_all()
    genre_ids = [escape(genre_id) for genre_id in genre_ids]
    book = book_from_form(form)

    if not valid:
        results = form_choices()
        return render_template('book_form.html', title='Create Book', authors=results['authors'],
                               genres=results['genres'], book=book,
                               checked=checked_genre_ids(results['genres'], genre_ids),
                               errors=form.error_messages())

    book.genres = find_genres_by_id(genre_ids)
    db.session.add(book)
    db.session.commit()
    logger.info("Created book %s (%r)", book.id, book.title)
    return redirect(book.url)


@catalog_bp.route('/book/<book_id>/delete', methods=['GET'])
def book_delete_get(book_id):
    results = parallel.run({
        'book': lambda: find_book(book_id),
        'book_instances': lambda: find_instances(book_id),
    })
    # Unlike detail and update, a missing book here is not an error
    if results['book'] is None:
        return redirect(url_for('catalog.book_list'))
    return render_template('book_delete.html', title='Delete Book', book=results['book'],
                           book_instances=results['book_instances'])


@catalog_bp.route('/book/<book_id>/delete', methods=['POST'])
def book_delete_post(book_id):
    target_id = request.form.get('bookid') or book_id
    results = parallel.run({
        'book': lambda: find_book(target_id),
        'book_instances': lambda: find_instances(target_id),
    })
    book, instances = results['book'], results['book_instances']

    if instances:
        logger.warning("Refusing to delete book %s: %d copies still reference it", target_id, len(instances))
        return render_template('book_delete.html', title='Delete Book', book=book,
                               book_instances=instances)

    record = db.session.get(Book, target_id)
    if record is not None:
        db.session.delete(record)
        db.session.commit()
        logger.info("Deleted book %s", target_id)
    return redirect(url_for('catalog.book_list'))


@catalog_bp.route('/book/<book_id>/update', methods=['GET'])
def book_update_get(book_id):
    results = parallel.run({
        'book': lambda: find_book(book_id),
        'authors': find_authors,
        'genres': find_genres,
    })
    book = results['book']
    if book is None:
        raise RecordNotFound('Book not found')
    return render_template('book_form.html', title='Update Book', authors=results['authors'],
                           genres=results['genres'], book=book,
                           checked=checked_genre_ids(results['genres'], [g.id for g in book.genres]))


@catalog_bp.route('/book/<book_id>/update', methods=['POST'])
def book_update_post(book_id):
    genre_ids = submitted_genres()

    form = BookForm()
    valid = form.validate()
    form.escape_fields(*UPDATE_FIELDS)
    genre_ids = [escape(genre_id) for genre_id in genre_ids]
    # Keep the existing id so the record is updated rather than recreated
    book = book_from_form(form, book_id=book_id)

    if not valid:
        results = form_choices()
        return render_template('book_form.html', title='Update Book', authors=results['authors'],
                               genres=results['genres'], book=book,
                               checked=checked_genre_ids(results['genres'], genre_ids),
                               errors=form.error_messages())

    record = db.session.get(Book, book_id)
    if record is None:
        raise RecordNotFound('Book not found')
    record.title = book.title
    record.author_id = book.author_id
    record.summary = book.summary
    record.isbn = book.isbn
    record.genres = find_genres_by_id(genre_ids)
    db.session.commit()
    logger.info("Updated book %s", record.id)
    return redirect(record.url)
