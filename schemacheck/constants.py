"""Constants for the schemacheck package."""

# Dialect URIs, as found in the "$schema" keyword of a root schema
DRAFTV3_URI = 'http://json-schema.org/draft-03/schema#'
DRAFTV4_URI = 'http://json-schema.org/draft-04/schema#'
DRAFTV6_URI = 'http://json-schema.org/draft-06/schema#'

# JSON node types
ARRAY = 'array'
BOOLEAN = 'boolean'
INTEGER = 'integer'
NULL = 'null'
NUMBER = 'number'
OBJECT = 'object'
STRING = 'string'

ALL_TYPES = frozenset([ARRAY, BOOLEAN, INTEGER, NULL, NUMBER, OBJECT, STRING])
NUMERIC_TYPES = frozenset([INTEGER, NUMBER])

# Keywords the engine itself interprets
REF = '$ref'
SCHEMA = '$schema'

# Domains of processing messages
DOMAIN_SYNTAX = 'syntax'
DOMAIN_VALIDATION = 'validation'
