# NOTICE:
#
# Based on md5crypt.py by michal wallace, itself based on perl's
# Crypt::PasswdMD5 by Luis Munoz and /usr/src/libcrypt/crypt.c from
# FreeBSD 2.2.5-RELEASE:
#
#  "THE BEER-WARE LICENSE" (Revision 42):
#  <phk@login.dknet.dk> wrote this file.  As long as you retain this notice you
#  can do whatever you want with this stuff. If we meet some day, and you think
#  this stuff is worth it, you can buy me a beer in return.   Poul-Henning Kamp
"""MD5-based crypt() as used by Apache's htpasswd (`$apr1$`) and by
FreeBSD/glibc (`$1$`).

The two schemes differ only in the magic string mixed into the initial
digest and written in front of the record. Everything here works on bytes;
turning passwords into bytes is up to the caller.

	>>> md5_crypt(b'apache', b'J.w5a/..')
	'$apr1$J.w5a/..$IW9y6DR0oO/ADuhlMF5/X1'
"""

from typing import List, Tuple
from hashlib import md5

APR1_MAGIC = b'$apr1$'
MD5CRYPT_MAGIC = b'$1$'
ITOA64 = './0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz'
ROUNDS = 1000
SALT_MAX = 8

# (odd, with salt, with password) for every round
_ROUND_PLAN: List[Tuple[bool, bool, bool]] = [
	(bool(i & 1), bool(i % 3), bool(i % 7)) for i in range(ROUNDS)
]

# Byte triples fed to to64(); yes, 5 comes after 10.
_FINAL_ORDER = (
	(0, 6, 12),
	(1, 7, 13),
	(2, 8, 14),
	(3, 9, 15),
	(4, 10, 5),
)

def md5_crypt(pw: bytes, salt: bytes, magic: bytes = APR1_MAGIC) -> str:
	salt = clean_salt(salt, magic)
	return encode(mix(pw, salt, magic), salt, magic)

def clean_salt(salt: bytes, magic: bytes = APR1_MAGIC) -> bytes:
	# Take care of the magic string if present
	if salt[:len(magic)] == magic:
		salt = salt[len(magic):]
	# salt can have up to 8 characters:
	salt = salt.split(b'$', 1)[0]
	return salt[:SALT_MAX]

def mix(pw: bytes, salt: bytes, magic: bytes = APR1_MAGIC) -> bytes:
	"""Run the digest mixer and return the final 16-byte digest.
	
	`salt` is used as given; see `clean_salt` for trimming a salt taken
	from an existing record.
	"""
	
	tmp = md5(pw + salt + pw).digest()
	
	ctx = md5()
	ctx.update(pw)
	ctx.update(magic)
	ctx.update(salt)
	
	for pl in range(len(pw), 0, -16):
		ctx.update(tmp[:min(pl, 16)])
	
	# Now the 'weird' xform
	i = len(pw)
	while i:
		if i & 1:
			ctx.update(b'\x00')
		else:
			ctx.update(pw[:1])
		i = i >> 1
	
	final = ctx.digest()
	
	# Each round depends on the digest of the one before it.
	for odd, with_salt, with_pw in _ROUND_PLAN:
		muddle = [pw if odd else final]
		if with_salt:
			muddle.append(salt)
		if with_pw:
			muddle.append(pw)
		muddle.append(final if odd else pw)
		final = md5(b''.join(muddle)).digest()
	
	return final

def encode(final: bytes, salt: bytes, magic: bytes = APR1_MAGIC) -> str:
	return '{}{}${}'.format(magic.decode('ascii'), salt.decode('ascii'), encode_digest(final))

def encode_digest(final: bytes) -> str:
	assert len(final) == 16
	passwd = ''.join(
		to64((final[a] << 16) | (final[b] << 8) | final[c], 4)
		for a, b, c in _FINAL_ORDER
	)
	# Only 22 characters are kept; byte 11 takes the last two.
	return passwd + to64(final[11], 2)

def to64(v: int, n: int) -> str:
	ret = ''
	while n > 0:
		n = n - 1
		ret = ret + ITOA64[v & 0x3f]
		v = v >> 6
	return ret
