from typing import Optional

class ClientError(Exception):
	pass

class ServerError(Exception):
	pass

class RandomSourceError(ServerError):
	pass

class InvalidInput(ClientError):
	pass

class NoCredentials(ClientError):
	pass

class UnknownAlgorithm(ClientError):
	pass

class MalformedLine(ClientError):
	lineno: Optional[int]
	
	def __init__(self, message: str, lineno: Optional[int] = None) -> None:
		if lineno is not None:
			message = "line {}: {}".format(lineno, message)
		super().__init__(message)
		self.lineno = lineno
