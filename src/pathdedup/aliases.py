from pathdedup.core.models import HashAlgorithm, KeyPolicy

ALGORITHM_ALIASES = {
    "md5": HashAlgorithm.MD5,
    "sha1": HashAlgorithm.SHA1,
    "sha256": HashAlgorithm.SHA256,
    "sha512": HashAlgorithm.SHA512,
    "xxh64": HashAlgorithm.XXH64,
    "xxhash": HashAlgorithm.XXH64,
}

ALGORITHM_CHOICES = list(ALGORITHM_ALIASES.keys())

ALGORITHM_HELP_TEXT = (
    "Hash function used for file digests:\n"
    "  md5, sha1, sha256, sha512 : hashlib digests (default: sha1)\n"
    "  xxh64 (xxhash)            : fast non-cryptographic xxHash64\n"
)

KEY_POLICY_ALIASES = {
    "hash": KeyPolicy.HASH,
    "size": KeyPolicy.SIZE,
    "size-hash": KeyPolicy.SIZE_HASH,
}

KEY_POLICY_CHOICES = list(KEY_POLICY_ALIASES.keys())

KEY_POLICY_HELP_TEXT = (
    "Equality key for duplicate groups:\n"
    "  hash      : content hash only; equal hash with different size stops the run\n"
    "  size      : file size only\n"
    "  size-hash : size and hash together; safe with truncated hashes and with large\n"
    "              files, which all share the digest of zero bytes\n"
)

BYTES_HELP_TEXT = (
    "Hash only the first N bytes of every file (e.g. 4K, 1MB).\n"
    "  0 hashes whole files, except files above the large-file threshold,\n"
    "  which get the digest of zero bytes. Default: 0\n"
)

CASE_INSENSITIVE_HELP = (
    "Prefix a pattern with ':case-insensitive:!' to match regardless of case."
)

EPILOG_TEXT = """
Examples:
  Walk a folder and write its inventory
  %(prog)s gather-paths -i ~/Music -o paths.csv

  Hash the inventory using only the first 4KB of every file
  %(prog)s hash-paths -i paths.csv -o hashed.csv --bytes 4K

  Keep mp3 files between 100KB and 20MB that share their size with another file
  %(prog)s filter-paths -i hashed.csv -o filtered.csv --min-size 100K --max-size 20M \\
      --whitelist-ends ':case-insensitive:!.mp3' --exclude-unique-sizes

  Detect duplicates and drop every non-representative path
  %(prog)s detect-dups -i filtered.csv -o dups.json
  %(prog)s unique-paths --input-paths hashed.csv --input-dups dups.json -o unique.csv

  Same as above + move the discarded duplicates to trash (with confirmation prompt)
  %(prog)s unique-paths --input-paths hashed.csv --input-dups dups.json -o unique.csv --trash

  Whole chain in one go
  %(prog)s run -i ~/Music --groups dups.json -o unique.csv
"""
