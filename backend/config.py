import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Comma separated list, '*' allows any origin
    CORS_ALLOWED_ORIGINS = os.environ.get('CORS_ALLOWED_ORIGINS', '*')
    SOCKETIO_NAMESPACE = os.environ.get('SOCKETIO_NAMESPACE', '/')
    HOST = os.environ.get('HOST', '0.0.0.0')
    PORT = int(os.environ.get('PORT', '3000'))
    # Round timers (seconds)
    ROUND_DURATION_SEC = int(os.environ.get('ROUND_DURATION_SEC', '30'))
    RESULTS_DURATION_SEC = int(os.environ.get('RESULTS_DURATION_SEC', '3'))
    FINAL_RESULT_DELAY_SEC = int(os.environ.get('FINAL_RESULT_DELAY_SEC', '3'))
    DEFAULT_TOTAL_ROUNDS = int(os.environ.get('DEFAULT_TOTAL_ROUNDS', '5'))
    MAX_TOTAL_ROUNDS = int(os.environ.get('MAX_TOTAL_ROUNDS', '20'))
    ROOM_CODE_LENGTH = int(os.environ.get('ROOM_CODE_LENGTH', '4'))
    # Fresh codes drawn before create_game gives up on collisions
    ROOM_CODE_ATTEMPTS = int(os.environ.get('ROOM_CODE_ATTEMPTS', '10'))
    MAX_NAME_LENGTH = int(os.environ.get('MAX_NAME_LENGTH', '32'))
    MAX_WORD_LENGTH = int(os.environ.get('MAX_WORD_LENGTH', '40'))
    PROMPT_URL_TEMPLATE = os.environ.get(
        'PROMPT_URL_TEMPLATE', 'https://picsum.photos/400/300?random={token}'
    )
