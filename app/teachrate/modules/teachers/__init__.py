"""Teacher catalog: teacher records and the admin screens that manage them."""
