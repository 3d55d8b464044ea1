import pytest
from flask import template_rendered

from locallibrary import create_app
from locallibrary.config import TestingConfig
from locallibrary.models import Author, Book, BookInstance, Genre, db
from locallibrary.parallel import parallel


@pytest.fixture
def app(tmp_path):
    # File-backed so the worker threads each get their own connection
    app = create_app(TestingConfig, SQLALCHEMY_DATABASE_URI=f"sqlite:///{tmp_path / 'test.db'}")
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()
        db.engine.dispose()
    parallel.shutdown(app)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def rendered(app):
    """Collects (template name, context) for every template rendered."""
    recorded = []

    def record(sender, template, context, **extra):
        recorded.append((template.name, context))

    template_rendered.connect(record, app)
    yield recorded
    template_rendered.disconnect(record, app)


@pytest.fixture
def catalog(app):
    austen = Author(first_name="Jane", family_name="Austen")
    twain = Author(first_name="Mark", family_name="Twain")
    fiction = Genre(name="Fiction")
    satire = Genre(name="Satire")
    pride = Book(title="Pride and Prejudice", author=austen, summary="Manners.",
                 isbn="9780141439518", genres=[fiction])
    finn = Book(title="Huckleberry Finn", author=twain, summary="River.",
                isbn="9780143107323", genres=[fiction, satire])
    copies = [
        BookInstance(book=pride, imprint="Penguin 2002", status="Available"),
        BookInstance(book=pride, imprint="Penguin 2003", status="Loaned"),
    ]
    db.session.add_all([austen, twain, fiction, satire, pride, finn, *copies])
    db.session.commit()
    return {
        'austen': austen.id,
        'twain': twain.id,
        'fiction': fiction.id,
        'satire': satire.id,
        'pride': pride.id,
        'finn': finn.id,
    }
