from . import settings as base

# copy all UPPERCASE settings from base into this module
for name in dir(base):
    if name.isupper():
        globals()[name] = getattr(base, name)

# override DB for tests
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

CHAT_STORE_BACKEND = "django"
CHATBOT_PROXY_URL = ""
OPENAI_API_KEY = "sk-test-key"
