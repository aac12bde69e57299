HASH_ALGORITHM = 'apr1'
# Cost factor for `bcrypt`; 10 is what Apache's htpasswd and Go's bcrypt use by default.
BCRYPT_ROUNDS = 10
HTPASSWD_MODE = 0o600
# Threads used to hash passwords; `None` lets the executor decide.
WORKERS = None

DEBUG = False
DEBUG_HTPASSWD = False

try:
	from settings_local import *
except ImportError:
	pass
