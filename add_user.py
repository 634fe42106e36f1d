from taskboard import config
from taskboard.logging_setup import setup_logging
from taskboard.main import create_app

setup_logging(config.LOG_LEVEL)

# Open the configured store (tables are created if missing)
board = create_app(storage_backend="sql")

try:
    # Check if user already exists
    email = "test@example.com"
    existing_user = board.identity.find_user_by_email(email)
    if existing_user:
        print("User already exists")
    else:
        # Create a test user (signup also starts a session for it)
        result = board.identity.signup("Test Employee", email, "password", "password")
        print(result.message)
        if result.success:
            board.identity.logout()
            print(f"Test user created: {email}")
finally:
    board.close()
