import bleach
from flask_wtf import FlaskForm
from wtforms import StringField, TextAreaField
from wtforms.validators import DataRequired


def strip_whitespace(value):
    return value.strip() if isinstance(value, str) else value


# Characters bleach leaves alone in text that are still escaped before storage
EXTRA_ENTITIES = str.maketrans({
    '"': '&quot;',
    "'": '&#x27;',
    '/': '&#x2F;',
    '\\': '&#x5C;',
    '`': '&#96;',
})


def escape(value):
    """Neutralize markup in user input; no tags are allowed through."""
    if value is None:
        return value
    return bleach.clean(value, tags=set(), strip=False).translate(EXTRA_ENTITIES)


def as_genre_list(value):
    """Normalize a submitted genre value: absent -> [], scalar -> [value]."""
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


class BookForm(FlaskForm):
    title = StringField('Title', filters=[strip_whitespace],
                        validators=[DataRequired('Title must not be empty.')])
    author = StringField('Author', filters=[strip_whitespace],
                         validators=[DataRequired('Author must not be empty.')])
    summary = TextAreaField('Summary', filters=[strip_whitespace],
                            validators=[DataRequired('Summary must not be empty.')])
    isbn = StringField('ISBN', filters=[strip_whitespace],
                       validators=[DataRequired('ISBN must not be empty.')])

    def error_messages(self):
        return [message for messages in self.errors.values() for message in messages]

    def escape_all(self):
        for field in self:
            if isinstance(field.data, str):
                field.data = escape(field.data)

    def escape_fields(self, *names):
        for name in names:
            field = self[name]
            field.data = escape(field.data)
