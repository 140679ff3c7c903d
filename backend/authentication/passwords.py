import bcrypt

# bcrypt refuses longer inputs
BCRYPT_MAX_BYTES = 72


def verify_password(plain_password: str, hashed_password: str) -> bool:
    encoded = plain_password.encode()
    if len(encoded) > BCRYPT_MAX_BYTES:
        return False
    return bcrypt.checkpw(encoded, hashed_password.encode())


def get_password_hash(password: str) -> str:
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()


# Checked against when the username is unknown so both failure paths pay for
# one bcrypt comparison.
DUMMY_PASSWORD_HASH = get_password_hash("not-a-real-password")
