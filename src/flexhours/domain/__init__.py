"""Pure time-data logic: parsing, locating, validation and projection."""
