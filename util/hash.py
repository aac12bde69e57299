import hashlib
import secrets
import base64
import string
from typing import Dict, Optional, Type, Union, Any

import bcrypt

from core import error
from util import md5crypt

Password = Union[str, bytes]

HASHERS: Dict[str, Type['Hasher']] = {}

SALT_CHARS = string.digits + string.ascii_uppercase + string.ascii_lowercase

class Hasher:
	# Can't leave it as None or mypy will complain
	algorithm = 'unknown'
	prefix = ''
	
	@classmethod
	def encode(cls, password: Password, *, salt: Optional[str] = None, rng: Any = None) -> str:
		raise NotImplementedError('Hasher.encode')
	
	@classmethod
	def identify(cls, encoded: str) -> bool:
		return bool(cls.prefix) and encoded.startswith(cls.prefix)
	
	@classmethod
	def extract_salt(cls, encoded: str) -> Optional[str]:
		return None
	
	@classmethod
	def verify(cls, password: Password, encoded: str) -> bool:
		if not cls.identify(encoded): return False
		encoded_2 = cls.encode(password, salt = cls.extract_salt(encoded))
		return secrets.compare_digest(encoded.encode('utf-8'), encoded_2.encode('utf-8'))

class MD5CryptHasher(Hasher):
	algorithm = 'md5crypt'
	magic = md5crypt.MD5CRYPT_MAGIC
	prefix = magic.decode('ascii')
	
	@classmethod
	def encode(cls, password: Password, *, salt: Optional[str] = None, rng: Any = None) -> str:
		if salt is None:
			salt = gen_salt(md5crypt.SALT_MAX, rng = rng)
		return md5crypt.md5_crypt(_to_bytes(password), salt.encode('ascii'), cls.magic)
	
	@classmethod
	def identify(cls, encoded: str) -> bool:
		return encoded.isascii() and encoded.startswith(cls.prefix)
	
	@classmethod
	def extract_salt(cls, encoded: str) -> Optional[str]:
		if not cls.identify(encoded): return None
		return md5crypt.clean_salt(encoded.encode('ascii'), cls.magic).decode('ascii')
HASHERS[MD5CryptHasher.algorithm] = MD5CryptHasher

class Apr1Hasher(MD5CryptHasher):
	algorithm = 'apr1'
	magic = md5crypt.APR1_MAGIC
	prefix = magic.decode('ascii')
HASHERS[Apr1Hasher.algorithm] = Apr1Hasher

class SHA1Hasher(Hasher):
	algorithm = 'sha1'
	prefix = '{SHA}'
	
	@classmethod
	def encode(cls, password: Password, *, salt: Optional[str] = None, rng: Any = None) -> str:
		assert not salt
		digest = hashlib.sha1(_to_bytes(password)).digest()
		return cls.prefix + base64.b64encode(digest).decode('ascii')
HASHERS[SHA1Hasher.algorithm] = SHA1Hasher

class BcryptHasher(Hasher):
	algorithm = 'bcrypt'
	prefixes = ('$2a$', '$2b$', '$2y$')
	# bcrypt only looks at this many bytes of the password
	max_length = 72
	
	@classmethod
	def encode(cls, password: Password, *, salt: Optional[str] = None, rng: Any = None) -> str:
		import settings
		pw = _to_bytes(password)
		if len(pw) > cls.max_length:
			raise error.InvalidInput("bcrypt passwords must not be longer than {} bytes".format(cls.max_length))
		if salt is None:
			bsalt = bcrypt.gensalt(rounds = settings.BCRYPT_ROUNDS, prefix = b'2a')
		else:
			bsalt = salt.encode('ascii')
		return bcrypt.hashpw(pw, bsalt).decode('ascii')
	
	@classmethod
	def identify(cls, encoded: str) -> bool:
		return encoded.startswith(cls.prefixes)
	
	@classmethod
	def verify(cls, password: Password, encoded: str) -> bool:
		if not cls.identify(encoded): return False
		try:
			return bcrypt.checkpw(_to_bytes(password)[:cls.max_length], encoded.encode('ascii'))
		except ValueError:
			# Malformed bcrypt record
			return False
HASHERS[BcryptHasher.algorithm] = BcryptHasher

def get_hasher(algorithm: str) -> Type[Hasher]:
	try: return HASHERS[algorithm]
	except KeyError: raise error.UnknownAlgorithm("unknown hash algorithm: {}".format(algorithm)) from None

def identify(encoded: str) -> Optional[Type[Hasher]]:
	for hasher in HASHERS.values():
		if hasher.identify(encoded):
			return hasher
	return None

def verify(password: Password, encoded: str) -> bool:
	hasher = identify(encoded)
	if hasher is None: return False
	return hasher.verify(password, encoded)

def hash_apr1(password: bytes, *, rng: Any = None) -> str:
	return Apr1Hasher.encode(password, rng = rng)

def gen_salt(length: int = md5crypt.SALT_MAX, *, rng: Any = None) -> str:
	if rng is None:
		rng = secrets.SystemRandom()
	try:
		return ''.join(rng.choice(SALT_CHARS) for _ in range(length))
	except (OSError, NotImplementedError) as ex:
		raise error.RandomSourceError("secure random source unavailable") from ex

def _to_bytes(password: Password) -> bytes:
	if isinstance(password, bytes):
		return password
	return password.encode('utf-8')
