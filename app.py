"""Compatibility shim: expose `app` for Gunicorn while delegating CLI to `cli.py`.

A deployment that runs `gunicorn app:app` gets the Flask application object
from `web_app.py`. Running `python app.py` works as a CLI by delegating to
`cli.main()`.
"""

from web_app import app as app  # exported WSGI app for Gunicorn


if __name__ == "__main__":
    import sys

    from cli import main

    sys.exit(main())
