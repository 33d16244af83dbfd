from utils.hashing import (verify_password, get_password_hash, BcryptHasher, generate_random_string,
RANDOM_ALPHABET)

def test_password_hashing():
    password = "supersecretpassword"
    hashed = get_password_hash(password)
    assert hashed != password

    # salted: same input, different digests
    assert get_password_hash(password) != hashed


def test_password_verification():
    password = "supersecretpassword"
    hashed = get_password_hash(password)

    assert verify_password(password, hashed) is True
    assert verify_password("wrongpassword", hashed) is False

    long_pass = "a" * 100
    hashed_long = get_password_hash(long_pass)
    assert verify_password(long_pass, hashed_long) is True


def test_bcrypt_hasher_capability():
    hasher = BcryptHasher()
    secret = hasher.hash("hunter22")

    assert secret.startswith("$2")
    assert hasher.verify("hunter22", secret) is True
    assert hasher.verify("hunter23", secret) is False


def test_generate_random_string():
    value = generate_random_string(32)

    assert len(value) == 32
    assert all(ch in RANDOM_ALPHABET for ch in value)
    assert generate_random_string(32) != value
