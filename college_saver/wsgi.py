#setup: python -m venv .venv
#setup: source .venv/bin/activate   # (windows: .venv\Scripts\activate)
#setup: pip install -U pip -e ".[test]"
#setup: flask --app college_saver.wsgi run --port 5000 --debug

from college_saver.app import create_app
from college_saver.config import load_settings
from college_saver.utils.logging import setup_logging

settings = load_settings()
setup_logging(settings.log_level)

app = create_app(settings)


if __name__ == "__main__":
    app.run(port=5000, debug=settings.env == "dev")
