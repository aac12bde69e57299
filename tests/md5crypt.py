import pytest

from util import md5crypt
from util.md5crypt import APR1_MAGIC, MD5CRYPT_MAGIC

from tests.mock import CountingMD5

# Generated by Apache's htpasswd
APR1_VECTORS = [
	(b'apache', '$apr1$J.w5a/..$IW9y6DR0oO/ADuhlMF5/X1'),
	(b'myPassword', '$apr1$r31.....$HqJZimcKQFAMYayBlzkrA/'),
	# openssl passwd -apr1
	(b'password', '$apr1$xxxxxxxx$dxHfLAsjHkDRmG83UXe8K0'),
]

# Generated by FreeBSD's crypt(3)
MD5CRYPT_VECTORS = [
	(b' ', '$1$yiiZbNIH$YiCsHZjcTkYd31wkgW8JF.'),
	(b'pass', '$1$YeNsbWdH$wvOF8JdqsoiLix754LTW90'),
	(b'____fifteen____', '$1$s9lUWACI$Kk1jtIVVdmT01p0z3b/hw1'),
	(b'____sixteen_____', '$1$dL3xbVZI$kkgqhCanLdxODGq14g/tW1'),
	(b'____seventeen____', '$1$NaH5na7J$j7y8Iss0hcRbu3kzoJs5V.'),
	(b'__________thirty-three___________', '$1$HO7Q6vzJ$yGwp2wbL5D7eOVzOmxpsy.'),
]

@pytest.mark.parametrize('pw, expected', APR1_VECTORS)
def test_apr1_known_hashes(pw, expected):
	salt = expected.split('$')[2].encode('ascii')
	assert md5crypt.md5_crypt(pw, salt) == expected

@pytest.mark.parametrize('pw, expected', MD5CRYPT_VECTORS)
def test_md5crypt_known_hashes(pw, expected):
	salt = expected.split('$')[2].encode('ascii')
	assert md5crypt.md5_crypt(pw, salt, MD5CRYPT_MAGIC) == expected

def test_salt_taken_from_record():
	(pw, expected) = APR1_VECTORS[0]
	assert md5crypt.md5_crypt(pw, expected.encode('ascii')) == expected

def test_mix_and_encode():
	(pw, expected) = APR1_VECTORS[1]
	final = md5crypt.mix(pw, b'r31.....')
	assert len(final) == 16
	assert md5crypt.mix(pw, b'r31.....') == final
	assert md5crypt.encode(final, b'r31.....') == expected
	assert md5crypt.encode_digest(final) == expected[-22:]

def test_magic_changes_digest():
	assert md5crypt.mix(b'pass', b'YeNsbWdH', APR1_MAGIC) != md5crypt.mix(b'pass', b'YeNsbWdH', MD5CRYPT_MAGIC)

@pytest.mark.parametrize('pw', [b'', b'x', b'0123456789abcdef', b'p' * 100])
def test_round_count(monkeypatch, pw):
	counter = CountingMD5()
	monkeypatch.setattr(md5crypt, 'md5', counter)
	md5crypt.mix(pw, b'xxxxxxxx')
	# One digest each for the seed and the mixing buffer, then the rounds
	assert counter.calls == 2 + md5crypt.ROUNDS

def test_empty_password():
	record = md5crypt.md5_crypt(b'', b'abcdefgh')
	assert record.startswith('$apr1$abcdefgh$')
	assert len(record.split('$')[3]) == 22
	assert md5crypt.md5_crypt(b'', b'abcdefgh') == record
	assert md5crypt.md5_crypt(b'\x00', b'abcdefgh') != record

def test_encode_digest_extremes():
	assert md5crypt.encode_digest(bytes(16)) == '.' * 22
	assert md5crypt.encode_digest(b'\xff' * 16) == 'z' * 21 + '1'

def test_encode_digest_byte_order():
	def _encode_one(idx):
		final = bytearray(16)
		final[idx] = 1
		return md5crypt.encode_digest(bytes(final))
	
	assert _encode_one(12) == '/...' + '.' * 18
	assert _encode_one(0) == '..E.' + '.' * 18
	assert _encode_one(6) == '.2..' + '.' * 18
	assert _encode_one(5) == '.' * 16 + '/...' + '..'
	assert _encode_one(11) == '.' * 20 + '/.'

def test_to64():
	assert md5crypt.to64(0, 4) == '....'
	assert md5crypt.to64(63, 1) == 'z'
	assert md5crypt.to64(64, 2) == './'
	assert md5crypt.to64(0xffffff, 4) == 'zzzz'

def test_clean_salt():
	assert md5crypt.clean_salt(b'$apr1$abc$def') == b'abc'
	assert md5crypt.clean_salt(b'0123456789') == b'01234567'
	assert md5crypt.clean_salt(b'$1$abcdefgh$xyz', MD5CRYPT_MAGIC) == b'abcdefgh'
	assert md5crypt.clean_salt(b'$1$abc', APR1_MAGIC) == b''
