import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///wordlers.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # Browser origins allowed to call the API and open the socket (comma separated)
    CORS_ORIGINS = os.environ.get('CORS_ORIGINS', 'http://localhost:5173,http://127.0.0.1:5173')
    # Starting words are upper-cased and must be exactly this many letters
    STARTING_WORD_LENGTH = int(os.environ.get('STARTING_WORD_LENGTH', '5'))
    # Read-modify-write attempts for a score submission before giving up on version conflicts
    SCORE_SUBMIT_MAX_ATTEMPTS = int(os.environ.get('SCORE_SUBMIT_MAX_ATTEMPTS', '3'))
    # strftime pattern for dates shown to players; storage always uses ISO dates
    DISPLAY_DATE_FORMAT = os.environ.get('DISPLAY_DATE_FORMAT', '%b %d, %Y')
