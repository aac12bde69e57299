from typing import Any
import traceback

class Logger:
	__slots__ = ('prefix', '_log')
	
	prefix: str
	_log: bool
	
	def __init__(self, prefix: str, obj: object) -> None:
		import settings
		self.prefix = '{}/{:04x}'.format(prefix, hash(obj) % 0xFFFF)
		self._log = settings.DEBUG and settings.DEBUG_HTPASSWD
	
	def info(self, *args: Any) -> None:
		if self._log:
			print(self.prefix, *args)
	
	def error(self, exc: Exception) -> None:
		traceback.print_exception(type(exc), exc, exc.__traceback__)
