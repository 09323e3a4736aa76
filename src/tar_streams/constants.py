r"""Block sizes, field widths and type flags of the ustar header record.

Offsets are not stored: each field starts where the previous one ends, in the
order given by :data:`FIELD_WIDTHS`. The fields span the first 500 bytes of the
:data:`HEADER_BLOCK`, and the 12 bytes after them are always zero.
"""

__all__ = [
    "HEADER_BLOCK",
    "DATA_BLOCK",
    "EOF_BLOCK",
    "NAMELEN",
    "MODELEN",
    "UIDLEN",
    "GIDLEN",
    "SIZELEN",
    "MODTIMELEN",
    "CHKSUMLEN",
    "TYPEFLAGLEN",
    "USTAR_MAGIC",
    "USTAR_MAGICLEN",
    "USTAR_USER_NAMELEN",
    "USTAR_GROUP_NAMELEN",
    "USTAR_DEVLEN",
    "USTAR_FILENAME_PREFIX",
    "FIELD_WIDTHS",
    "LF_OLDNORM",
    "LF_NORMAL",
    "LF_LINK",
    "LF_SYMLINK",
    "LF_CHR",
    "LF_BLK",
    "LF_DIR",
    "LF_FIFO",
    "LF_CONTIG",
    "DEFAULT_DIR_MODE",
    "DEFAULT_FILE_MODE",
    "SKIP_BUFFER_SIZE",
    "COPY_BUFFER_SIZE",
]

HEADER_BLOCK = 512
DATA_BLOCK = 512
# Standard end-of-archive marker is 2 zero records
EOF_BLOCK = 2 * DATA_BLOCK

NAMELEN = 100
MODELEN = 8
UIDLEN = 8
GIDLEN = 8
SIZELEN = 12
MODTIMELEN = 12
CHKSUMLEN = 8
TYPEFLAGLEN = 1

USTAR_MAGIC = "ustar  "
USTAR_MAGICLEN = 8
USTAR_USER_NAMELEN = 32
USTAR_GROUP_NAMELEN = 32
USTAR_DEVLEN = 8
USTAR_FILENAME_PREFIX = 155

FIELD_WIDTHS = (
    ("name", NAMELEN),
    ("mode", MODELEN),
    ("user_id", UIDLEN),
    ("group_id", GIDLEN),
    ("size", SIZELEN),
    ("mod_time", MODTIMELEN),
    ("check_sum", CHKSUMLEN),
    ("typeflag", TYPEFLAGLEN),
    ("link_name", NAMELEN),
    ("magic", USTAR_MAGICLEN),
    ("user_name", USTAR_USER_NAMELEN),
    ("group_name", USTAR_GROUP_NAMELEN),
    ("dev_major", USTAR_DEVLEN),
    ("dev_minor", USTAR_DEVLEN),
    ("name_prefix", USTAR_FILENAME_PREFIX),
)

# Type flags (a NUL byte is the pre-POSIX spelling of a regular file)
LF_OLDNORM = 0
LF_NORMAL = ord("0")
LF_LINK = ord("1")
LF_SYMLINK = ord("2")
LF_CHR = ord("3")
LF_BLK = ord("4")
LF_DIR = ord("5")
LF_FIFO = ord("6")
LF_CONTIG = ord("7")

# Default umask
DEFAULT_DIR_MODE = 0o755
DEFAULT_FILE_MODE = 0o644

SKIP_BUFFER_SIZE = 2048
COPY_BUFFER_SIZE = 1 << 14
