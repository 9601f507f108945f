import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///wordle-score.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # Remote sync service base URL. Empty disables pushing and server restore.
    SYNC_API_URL = os.environ.get('SYNC_API_URL', '')
    SYNC_TIMEOUT_SEC = int(os.environ.get('SYNC_TIMEOUT_SEC', '10'))
    # How long success/failed stays visible before reverting to idle (sec)
    SYNC_STATUS_DISPLAY_SEC = float(os.environ.get('SYNC_STATUS_DISPLAY_SEC', '2'))
    # Date of puzzle 0; day offsets count from here
    WORDLE_EPOCH = os.environ.get('WORDLE_EPOCH', '2021-06-19')
    # Optional: run pushes in background tasks even when TESTING
    SYNC_BACKGROUND_IN_TESTS = False
