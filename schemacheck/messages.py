"""Message templates for syntax and validation messages.

Templates are Jinja2 strings keyed by a message id. The id travels
with every message so that callers can match on it, while the rendered
text is meant for humans.
"""

import json
from typing import Any

import jinja2

TEMPLATES = {
    # syntax
    'not_a_schema': 'value is not a JSON Schema (found {{ found }}, expected one of [{{ expected|join(", ") }}])',
    'unknown_keywords': 'unknown keyword(s) found in schema, ignored: [{{ ignored|join(", ") }}]',
    'incorrect_type': 'keyword "{{ keyword }}" has incorrect type (found {{ found }}, expected one of [{{ expected|join(", ") }}])',
    'not_a_natural': 'value of "{{ keyword }}" must be a non negative integer (found {{ value|json }})',
    'divisor_not_positive': 'value of "{{ keyword }}" must be strictly greater than 0 (found {{ value|json }})',
    'invalid_uri': 'value of "{{ keyword }}" is not a valid URI ({{ value|json }})',
    'uri_not_absolute': 'value of "{{ keyword }}" must be an absolute URI ({{ value|json }})',
    'invalid_regex': 'invalid regular expression ({{ value|json }}) in "{{ keyword }}"',
    'invalid_regex_member': 'member name {{ value|json }} of "{{ keyword }}" is not a valid regular expression',
    'enum_empty': 'an enum array must have at least one element',
    'enum_not_unique': 'elements in the enum array are not unique',
    'exclusive_without_limit': 'keyword "{{ keyword }}" must be used together with "{{ required }}"',
    'array_empty': 'array of keyword "{{ keyword }}" must have at least one element',
    'array_element_type': 'element at index {{ index }} of "{{ keyword }}" has incorrect type (found {{ found }}, expected one of [{{ expected|join(", ") }}])',
    'array_not_unique': 'elements in the array of keyword "{{ keyword }}" are not unique',
    'dependency_self': 'a property cannot depend on itself ({{ property|json }})',
    'dependency_value_type': 'dependency value for property {{ property|json }} has incorrect type (found {{ found }}, expected one of [{{ expected|join(", ") }}])',
    'dependency_element_type': 'dependency array for property {{ property|json }} has an element of incorrect type at index {{ index }} (found {{ found }}, expected string)',
    'dependency_array_empty': 'dependency array for property {{ property|json }} must have at least one element',
    'dependency_array_not_unique': 'dependency array for property {{ property|json }} has duplicate elements',
    'unknown_type_name': 'keyword "{{ keyword }}" refers to unknown primitive type {{ value|json }} (valid types are [{{ valid|join(", ") }}])',
    # validation
    'type_mismatch': 'instance type ({{ found }}) does not match any allowed primitive type (allowed: [{{ expected|join(", ") }}])',
    'disallowed_type': 'instance type ({{ found }}) matches a disallowed type (disallowed: [{{ disallowed|join(", ") }}])',
    'disallowed_schema': 'instance is valid against a disallowed schema (matched {{ matched }} of {{ total }})',
    'additional_items': 'array must not contain more than {{ allowed }} elements (found {{ found }})',
    'min_items': 'array has less than minItems elements (found {{ found }}, required minimum {{ minItems }})',
    'max_items': 'array has more than maxItems elements (found {{ found }}, allowed maximum {{ maxItems }})',
    'unique_items': 'elements in the array are not unique',
    'minimum': 'numeric instance is lower than the required minimum (minimum: {{ minimum|json }}, found: {{ found|json }})',
    'exclusive_minimum': 'numeric instance is not strictly greater than the required minimum {{ minimum|json }} (found: {{ found|json }})',
    'maximum': 'numeric instance is greater than the required maximum (maximum: {{ maximum|json }}, found: {{ found|json }})',
    'exclusive_maximum': 'numeric instance is not strictly lower than the required maximum {{ maximum|json }} (found: {{ found|json }})',
    'multiple_of': 'remainder of division is not zero ({{ found|json }} / {{ divisor|json }})',
    'min_length': 'string {{ value|json }} is too short (length: {{ found }}, required minimum: {{ minLength }})',
    'max_length': 'string {{ value|json }} is too long (length: {{ found }}, maximum allowed: {{ maxLength }})',
    'pattern': 'ECMA 262 regex {{ regex|json }} does not match input string {{ string|json }}',
    'enum': 'instance value ({{ value|json }}) not found in enum (possible values: {{ enum|json }})',
    'const': 'instance value ({{ value|json }}) does not match the constant {{ const|json }}',
    'additional_properties': 'additional properties are not permitted: [{{ unwanted|join(", ") }}]',
    'min_properties': 'object has too few properties (found {{ found }}, required minimum {{ minProperties }})',
    'max_properties': 'object has too many properties (found {{ found }}, allowed maximum {{ maxProperties }})',
    'required_missing': 'object has missing required properties ([{{ missing|join(", ") }}])',
    'dependency_missing': 'property {{ property|json }} of object has missing property dependencies (requires [{{ required|join(", ") }}]; missing: [{{ missing|join(", ") }}])',
    'all_of': 'instance failed to match all required schemas (matched only {{ matched }} out of {{ total }})',
    'any_of': 'instance failed to match at least one required schema among {{ total }}',
    'one_of': 'instance failed to match exactly one schema (matched {{ matched }} out of {{ total }})',
    'not': 'instance matched a schema which it should not have',
    'type_schema_mismatch': 'instance failed to match any allowed type or schema (types: [{{ expected|join(", ") }}], schemas: {{ total }})',
    'contains': 'array does not contain an element that is valid against the "contains" schema',
    'property_names': 'object has property names which are invalid against the "propertyNames" schema: [{{ invalid|join(", ") }}]',
    'false_schema': 'schema is false, no instance is valid against it',
    'validation_loop': 'validation loop: schema {{ location|json }} visited twice for instance pointer {{ pointer|json }}',
    'format_unknown': 'format attribute {{ format|json }} not supported',
    'format_invalid': 'string {{ value|json }} is invalid against requested {{ description }}',
    'format_invalid_number': 'value {{ value|json }} is invalid against requested {{ description }}',
}


def _to_json(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, default=str)


_env = jinja2.Environment(loader=jinja2.DictLoader(TEMPLATES), autoescape=False)
_env.filters['json'] = _to_json


def render_message(key: str, **kvargs) -> str:
    """
    Render a message template.

    Args:
        key (str): The message id, one of the keys of TEMPLATES.
        **kvargs: The template arguments.

    Returns:
        str: The rendered message text.
    """
    template = _env.get_template(key)
    return template.render(**kvargs)
