"""Common infrastructure: errors, logging, retry."""
