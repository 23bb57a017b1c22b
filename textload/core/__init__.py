"""
Core record transformation: splitting, filtering, cleaning, decoding,
validation and key generation. Everything here works on one record at a time
and never starts a Spark job.
"""
