"""
Error types raised by the catalog views and the app-level handlers that render them.

Data-access failures are not wrapped: any ``SQLAlchemyError`` reaches
``handle_data_access_error`` unchanged.
"""
import logging

from flask import render_template
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

from .models import db

logger = logging.getLogger(__name__)


class CatalogError(Exception):
    code = 500

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class RecordNotFound(CatalogError):
    code = 404


def handle_catalog_error(e: CatalogError):
    return render_template('error.html', message=e.message, status=e.code), e.code


def handle_http_error(e: HTTPException):
    return render_template('error.html', message=e.description, status=e.code), e.code


def handle_data_access_error(e: SQLAlchemyError):
    db.session.rollback()
    logger.exception("Database error while handling request")
    return render_template('error.html', message="Database error", status=500), 500


def register_error_handlers(app):
    app.register_error_handler(CatalogError, handle_catalog_error)
    app.register_error_handler(HTTPException, handle_http_error)
    app.register_error_handler(SQLAlchemyError, handle_data_access_error)
