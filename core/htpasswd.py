from typing import Dict, Optional, Type, Any
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
import asyncio
import functools
import os

from util import hash
from util.hash import Hasher, Password
from util.misc import Logger
from . import error

def read_credentials(path: Path) -> Dict[str, str]:
	# One `username password` pair per line.
	credentials: Dict[str, str] = {}
	with open(path, 'r', encoding = 'utf-8') as f:
		for lineno, line in enumerate(f, 1):
			line = line.rstrip('\r\n')
			if not line.strip(): continue
			parts = line.split(' ')
			if len(parts) != 2:
				raise error.MalformedLine(
					"in-data file must have the username and password separated with a space "
					"and each entry needs to end with a newline", lineno,
				)
			(username, password) = (part.strip() for part in parts)
			if not username or ':' in username:
				raise error.MalformedLine("usernames must not be empty or contain ':'", lineno)
			if not password:
				raise error.InvalidInput("line {}: passwords must not be empty".format(lineno))
			credentials[username] = password
	if not credentials:
		raise error.NoCredentials("No username/password pairs found in file")
	return credentials

def encrypt(credentials: Dict[str, str], hasher: Type[Hasher], *, workers: Optional[int] = None, rng: Any = None) -> Dict[str, str]:
	loop = asyncio.new_event_loop()
	try:
		with ThreadPoolExecutor(max_workers = workers) as executor:
			return loop.run_until_complete(encrypt_async(credentials, hasher, executor, rng = rng))
	finally:
		loop.close()

async def encrypt_async(credentials: Dict[str, str], hasher: Type[Hasher], executor: Any, *, rng: Any = None) -> Dict[str, str]:
	# Every password is hashed on its own; nothing is shared between them.
	loop = asyncio.get_event_loop()
	usernames = list(credentials)
	results = await asyncio.gather(*(
		loop.run_in_executor(executor, functools.partial(hasher.encode, credentials[username], rng = rng))
		for username in usernames
	), return_exceptions = True)
	# Every hash has finished here; report the first failure.
	for result in results:
		if isinstance(result, BaseException):
			raise result
	return dict(zip(usernames, results))

def store(path: Path, records: Dict[str, str]) -> None:
	import settings
	content = ''.join('{}:{}\n'.format(username, record) for username, record in records.items())
	fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, settings.HTPASSWD_MODE)
	with open(fd, 'w', encoding = 'utf-8') as f:
		# `os.open` only applies the mode to new files
		os.chmod(path, settings.HTPASSWD_MODE)
		f.write(content)

def convert(path: Path, algorithm: Optional[str] = None, *, workers: Optional[int] = None, rng: Any = None) -> int:
	import settings
	if algorithm is None:
		algorithm = settings.HASH_ALGORITHM
	if workers is None:
		workers = settings.WORKERS
	hasher = hash.get_hasher(algorithm)
	
	logger = Logger('convert', path)
	credentials = read_credentials(path)
	logger.info("read", len(credentials), "entries from", path)
	records = encrypt(credentials, hasher, workers = workers, rng = rng)
	logger.info("hashed with", hasher.algorithm)
	store(path, records)
	logger.info("wrote", path)
	return len(records)

class HtpasswdFile:
	__slots__ = ('users',)
	
	users: Dict[str, str]
	
	def __init__(self, content: str) -> None:
		self.users = {}
		for lineno, line in enumerate(content.splitlines(), 1):
			line = line.strip()
			if not line or line.startswith('#'):
				continue
			if ':' not in line:
				raise error.MalformedLine("missing ':' separator", lineno)
			(user, pwhash) = line.split(':', 1)
			if not user:
				raise error.MalformedLine("empty username", lineno)
			self.users[user] = pwhash
	
	@classmethod
	def from_file(cls, path: Path) -> 'HtpasswdFile':
		with open(path, 'r', encoding = 'utf-8') as f:
			return cls(f.read())
	
	def check_password(self, username: str, password: Password) -> bool:
		pwhash = self.users.get(username)
		if pwhash is None:
			return False
		return hash.verify(password, pwhash)
