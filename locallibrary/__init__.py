"""
Local Library catalog: Flask application factory.

Run:
    pip install -e .
    flask --app locallibrary init-db
    flask --app locallibrary run

Open http://127.0.0.1:5000/catalog/
"""
import logging
from datetime import date

import click
from flask import Flask, redirect, url_for
from flask.cli import with_appcontext
from flask_wtf import CSRFProtect

from .config import Config
from .models import Author, Book, BookInstance, Genre, db
from .parallel import parallel

csrf = CSRFProtect()


def create_app(config_object=Config, **overrides):
    app = Flask(__name__, template_folder="templates")
    app.config.from_object(config_object)
    app.config.update(overrides)

    logging.getLogger(__name__).setLevel(app.config.get('LOG_LEVEL', 'INFO'))

    db.init_app(app)
    csrf.init_app(app)
    parallel.init_app(app)

    from .book_controller import catalog_bp
    from .errors import register_error_handlers

    app.register_blueprint(catalog_bp)
    register_error_handlers(app)

    @app.route('/')
    def home():
        return redirect(url_for('catalog.index'))

    app.cli.add_command(init_db_command)
    return app


def seed_sample_data():
    """Add sample authors, genres, books and copies to an empty database."""
    if Author.query.first():
        return False
    austen = Author(first_name="Jane", family_name="Austen", date_of_birth=date(1775, 12, 16),
                    date_of_death=date(1817, 7, 18))
    twain = Author(first_name="Mark", family_name="Twain", date_of_birth=date(1835, 11, 30),
                   date_of_death=date(1910, 4, 21))
    fiction = Genre(name="Fiction")
    satire = Genre(name="Satire")
    pride = Book(title="Pride and Prejudice", author=austen, isbn="9780141439518",
                 summary="A classic novel of manners.", genres=[fiction])
    finn = Book(title="Adventures of Huckleberry Finn", author=twain, isbn="9780143107323",
                summary="A boy and a runaway slave travel down the Mississippi.", genres=[fiction, satire])
    copies = [
        BookInstance(book=pride, imprint="Penguin Classics, 2002", status="Available"),
        BookInstance(book=pride, imprint="Penguin Classics, 2002", status="Loaned"),
        BookInstance(book=finn, imprint="Penguin Classics, 2014", status="Maintenance"),
    ]
    db.session.add_all([austen, twain, fiction, satire, pride, finn, *copies])
    db.session.commit()
    return True


@click.command("init-db")
@with_appcontext
def init_db_command():
    """Create the tables and add sample data (for dev only)."""
    db.create_all()
    if seed_sample_data():
        click.echo("Initialized DB with sample data.")
    else:
        click.echo("DB already initialized.")
