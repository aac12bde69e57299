import argparse
import sys
from pathlib import Path
from typing import List, Optional

from core import htpasswd, error

def main(argv: Optional[List[str]] = None) -> int:
	parser = argparse.ArgumentParser(description = "Check a password against a htpasswd file.")
	parser.add_argument('path', type = Path, help = "htpasswd file")
	parser.add_argument('username')
	parser.add_argument('password')
	args = parser.parse_args(argv)
	
	try:
		htfile = htpasswd.HtpasswdFile.from_file(args.path)
	except (error.ClientError, OSError) as ex:
		print("error: {}".format(ex))
		return 1
	
	if not htfile.check_password(args.username, args.password):
		print("Password mismatch.")
		return 1
	print("Password OK.")
	return 0

if __name__ == '__main__':
	sys.exit(main())
