import argparse
import sys
from pathlib import Path
from typing import List, Optional

from core import htpasswd, error
from util import hash
from util.misc import Logger

def main(argv: Optional[List[str]] = None) -> int:
	import settings
	parser = argparse.ArgumentParser(description = "Convert a `username password` file into a htpasswd file, in place.")
	parser.add_argument('path', type = Path, help = "file with one `username password` pair per line")
	parser.add_argument(
		'--algorithm', choices = sorted(hash.HASHERS), default = settings.HASH_ALGORITHM,
		help = "password hash to write (default: %(default)s)"
	)
	parser.add_argument('--workers', type = int, default = settings.WORKERS, help = "number of hashing threads")
	args = parser.parse_args(argv)
	
	try:
		count = htpasswd.convert(args.path, args.algorithm, workers = args.workers)
	except (error.ClientError, error.ServerError, OSError) as ex:
		if settings.DEBUG:
			Logger('convert', args.path).error(ex)
		print("error: {}".format(ex))
		return 1
	
	print("Converted {} entries.".format(count))
	print("File has been converted to a htpasswd file")
	return 0

if __name__ == '__main__':
	sys.exit(main())
