"""Keyword validators.

A keyword validator is built once per distinct keyword digest and then
shared by every schema location with that digest. Validators built from
a null digest read the keyword value from the schema at validation time.
Validators never raise for validation failures, they add messages to
the context's current report.
"""

from fractions import Fraction
from typing import Any, Dict, List

from schemacheck import ecmaregex
from schemacheck.common import json_equals, node_type, to_decimal, unique_items
from schemacheck.report import LogLevel, ValidationReport


class KeywordValidator:
    """Base class of all keyword validators."""

    keyword: str = ''

    def __init__(self, content: Any):
        self.content = content

    def validate(self, context, data) -> None:
        """
        Validate an instance.

        Args:
            context (ValidationContext): The validation context.
            data (InstanceData): The schema node, instance and instance pointer.
        """
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.content!r})"


class AdditionalItemsValidator(KeywordValidator):
    keyword = 'additionalItems'

    def validate(self, context, data):
        if self.content['additionalItems']:
            return
        allowed = self.content['itemsSize']
        found = len(data.instance)
        if found > allowed:
            context.report(data, self.keyword, 'additional_items', allowed=allowed, found=found)


class MinItemsValidator(KeywordValidator):
    keyword = 'minItems'

    def validate(self, context, data):
        limit = self.content[self.keyword]
        if len(data.instance) < limit:
            context.report(data, self.keyword, 'min_items', found=len(data.instance), minItems=limit)


class MaxItemsValidator(KeywordValidator):
    keyword = 'maxItems'

    def validate(self, context, data):
        limit = self.content[self.keyword]
        if len(data.instance) > limit:
            context.report(data, self.keyword, 'max_items', found=len(data.instance), maxItems=limit)


class UniqueItemsValidator(KeywordValidator):
    keyword = 'uniqueItems'

    def validate(self, context, data):
        if self.content[self.keyword] and not unique_items(data.instance):
            context.report(data, self.keyword, 'unique_items')


class MinimumValidator(KeywordValidator):
    """minimum, exclusive when the digest says so (drafts 3 and 4)."""
    keyword = 'minimum'

    def validate(self, context, data):
        limit = self.content[self.keyword]
        value = to_decimal(data.instance)
        if value < to_decimal(limit):
            context.report(data, self.keyword, 'minimum', minimum=limit, found=data.instance)
        elif self.content.get('exclusive') and value == to_decimal(limit):
            context.report(data, self.keyword, 'exclusive_minimum', minimum=limit, found=data.instance)


class MaximumValidator(KeywordValidator):
    """maximum, exclusive when the digest says so (drafts 3 and 4)."""
    keyword = 'maximum'

    def validate(self, context, data):
        limit = self.content[self.keyword]
        value = to_decimal(data.instance)
        if value > to_decimal(limit):
            context.report(data, self.keyword, 'maximum', maximum=limit, found=data.instance)
        elif self.content.get('exclusive') and value == to_decimal(limit):
            context.report(data, self.keyword, 'exclusive_maximum', maximum=limit, found=data.instance)


class ExclusiveMinimumValidator(KeywordValidator):
    """Numeric exclusiveMinimum of draft 6."""
    keyword = 'exclusiveMinimum'

    def validate(self, context, data):
        limit = self.content[self.keyword]
        if to_decimal(data.instance) <= to_decimal(limit):
            context.report(data, self.keyword, 'exclusive_minimum', minimum=limit, found=data.instance)


class ExclusiveMaximumValidator(KeywordValidator):
    """Numeric exclusiveMaximum of draft 6."""
    keyword = 'exclusiveMaximum'

    def validate(self, context, data):
        limit = self.content[self.keyword]
        if to_decimal(data.instance) >= to_decimal(limit):
            context.report(data, self.keyword, 'exclusive_maximum', maximum=limit, found=data.instance)


class MultipleOfValidator(KeywordValidator):
    keyword = 'multipleOf'

    def validate(self, context, data):
        divisor = self.content[self.keyword]
        quotient = Fraction(to_decimal(data.instance)) / Fraction(to_decimal(divisor))
        if quotient.denominator != 1:
            context.report(data, self.keyword, 'multiple_of', found=data.instance, divisor=divisor)


class DivisibleByValidator(MultipleOfValidator):
    keyword = 'divisibleBy'


class MinLengthValidator(KeywordValidator):
    keyword = 'minLength'

    def validate(self, context, data):
        limit = self.content[self.keyword]
        if len(data.instance) < limit:
            context.report(data, self.keyword, 'min_length', value=data.instance,
                           found=len(data.instance), minLength=limit)


class MaxLengthValidator(KeywordValidator):
    keyword = 'maxLength'

    def validate(self, context, data):
        limit = self.content[self.keyword]
        if len(data.instance) > limit:
            context.report(data, self.keyword, 'max_length', value=data.instance,
                           found=len(data.instance), maxLength=limit)


class PatternValidator(KeywordValidator):
    keyword = 'pattern'

    def validate(self, context, data):
        regex = data.schema.get(self.keyword)
        if not ecmaregex.matches(regex, data.instance):
            context.report(data, self.keyword, 'pattern', regex=regex, string=data.instance)


class EnumValidator(KeywordValidator):
    keyword = 'enum'

    def validate(self, context, data):
        values = self.content[self.keyword]
        if not any(json_equals(data.instance, value) for value in values):
            context.report(data, self.keyword, 'enum', value=data.instance, enum=values)


class ConstValidator(KeywordValidator):
    keyword = 'const'

    def validate(self, context, data):
        value = self.content[self.keyword]
        if not json_equals(data.instance, value):
            context.report(data, self.keyword, 'const', value=data.instance, const=value)


class AdditionalPropertiesValidator(KeywordValidator):
    keyword = 'additionalProperties'

    def validate(self, context, data):
        if self.content['additionalProperties']:
            return
        properties = set(self.content['properties'])
        patterns = self.content['patternProperties']
        unwanted = [name for name in sorted(data.instance)
                    if name not in properties
                    and not any(ecmaregex.matches(pattern, name) for pattern in patterns)]
        if unwanted:
            context.report(data, self.keyword, 'additional_properties', unwanted=unwanted)


class MinPropertiesValidator(KeywordValidator):
    keyword = 'minProperties'

    def validate(self, context, data):
        limit = self.content[self.keyword]
        if len(data.instance) < limit:
            context.report(data, self.keyword, 'min_properties', found=len(data.instance), minProperties=limit)


class MaxPropertiesValidator(KeywordValidator):
    keyword = 'maxProperties'

    def validate(self, context, data):
        limit = self.content[self.keyword]
        if len(data.instance) > limit:
            context.report(data, self.keyword, 'max_properties', found=len(data.instance), maxProperties=limit)


class RequiredValidator(KeywordValidator):
    keyword = 'required'

    def validate(self, context, data):
        required = self.content['required']
        missing = [name for name in required if name not in data.instance]
        if missing:
            context.report(data, self.keyword, 'required_missing', required=required, missing=missing)


class DraftV3PropertiesValidator(RequiredValidator):
    """Draft 3 flags required properties inside the properties keyword."""
    keyword = 'properties'


class DependenciesValidator(KeywordValidator):
    keyword = 'dependencies'

    def validate(self, context, data):
        present = set(data.instance)
        property_deps: Dict[str, List[str]] = self.content['propertyDeps']
        for name in sorted(property_deps):
            if name not in present:
                continue
            required = property_deps[name]
            missing = [dependency for dependency in required if dependency not in present]
            if missing:
                context.report(data, self.keyword, 'dependency_missing', property=name,
                               required=required, missing=missing)
        for name in self.content['schemaDeps']:
            if name in present:
                context.process(data.schema.append(self.keyword, name), data)


class _SchemaArrayValidator(KeywordValidator):
    """Validates the instance against each schema of an array, in sub-reports."""

    def validate_all(self, context, data) -> Dict[str, ValidationReport]:
        reports: Dict[str, ValidationReport] = {}
        for index in range(len(data.schema.get(self.keyword))):
            child = data.schema.append(self.keyword, index)
            reports[child.pointer] = context.subreport(child, data)
        return reports


class AllOfValidator(_SchemaArrayValidator):
    keyword = 'allOf'

    def validate(self, context, data):
        reports = self.validate_all(context, data)
        matched = sum(1 for report in reports.values() if report.is_success())
        if matched != len(reports):
            context.report(data, self.keyword, 'all_of', matched=matched, total=len(reports), reports=reports)


class AnyOfValidator(_SchemaArrayValidator):
    keyword = 'anyOf'

    def validate(self, context, data):
        reports = self.validate_all(context, data)
        if not any(report.is_success() for report in reports.values()):
            context.report(data, self.keyword, 'any_of', total=len(reports), reports=reports)


class OneOfValidator(_SchemaArrayValidator):
    keyword = 'oneOf'

    def validate(self, context, data):
        reports = self.validate_all(context, data)
        matched = sum(1 for report in reports.values() if report.is_success())
        if matched != 1:
            context.report(data, self.keyword, 'one_of', matched=matched, total=len(reports), reports=reports)


class NotValidator(KeywordValidator):
    keyword = 'not'

    def validate(self, context, data):
        child = data.schema.append(self.keyword)
        report = context.subreport(child, data)
        if report.is_success():
            context.report(data, self.keyword, 'not', reports={child.pointer: report})


class DraftV3TypeValidator(KeywordValidator):
    """Draft 3 type: a primitive type match, or else validity against one of the schemas."""
    keyword = 'type'

    def validate(self, context, data):
        types = self.content[self.keyword]
        found = node_type(data.instance)
        if found in types:
            return
        indices = self.content['schemas']
        if not indices:
            context.report(data, self.keyword, 'type_mismatch', found=found, expected=types)
            return
        reports: Dict[str, ValidationReport] = {}
        for index in indices:
            child = data.schema.append(self.keyword, index)
            report = context.subreport(child, data)
            if report.is_success():
                return
            reports[child.pointer] = report
        context.report(data, self.keyword, 'type_schema_mismatch', found=found, expected=types,
                       total=len(indices), reports=reports)


class DisallowValidator(KeywordValidator):
    keyword = 'disallow'

    def validate(self, context, data):
        types = self.content[self.keyword]
        found = node_type(data.instance)
        if found in types:
            context.report(data, self.keyword, 'disallowed_type', found=found, disallowed=types)
            return
        indices = self.content['schemas']
        if not indices:
            return
        reports: Dict[str, ValidationReport] = {}
        for index in indices:
            child = data.schema.append(self.keyword, index)
            reports[child.pointer] = context.subreport(child, data)
        matched = sum(1 for report in reports.values() if report.is_success())
        if matched:
            context.report(data, self.keyword, 'disallowed_schema', matched=matched,
                           total=len(indices), reports=reports)


class ExtendsValidator(KeywordValidator):
    """Draft 3 extends: the instance must also be valid against the extended schemas."""
    keyword = 'extends'

    def validate(self, context, data):
        value = data.schema.get(self.keyword)
        if isinstance(value, list):
            for index in range(len(value)):
                context.process(data.schema.append(self.keyword, index), data)
        else:
            context.process(data.schema.append(self.keyword), data)


class DraftV4TypeValidator(KeywordValidator):
    keyword = 'type'

    def validate(self, context, data):
        types = self.content[self.keyword]
        found = node_type(data.instance)
        if found not in types:
            context.report(data, self.keyword, 'type_mismatch', found=found, expected=types)


class ContainsValidator(KeywordValidator):
    keyword = 'contains'

    def validate(self, context, data):
        child = data.schema.append(self.keyword)
        reports: Dict[str, ValidationReport] = {}
        for index, element in enumerate(data.instance):
            report = context.subreport(child, data, element, index)
            if report.is_success():
                return
            reports[str(index)] = report
        context.report(data, self.keyword, 'contains', reports=reports)


class PropertyNamesValidator(KeywordValidator):
    keyword = 'propertyNames'

    def validate(self, context, data):
        child = data.schema.append(self.keyword)
        reports: Dict[str, ValidationReport] = {}
        for name in sorted(data.instance):
            report = context.subreport(child, data, name)
            if not report.is_success():
                reports[name] = report
        if reports:
            context.report(data, self.keyword, 'property_names', invalid=list(reports), reports=reports)


class FormatValidator(KeywordValidator):
    """Looks up the format attribute named by the schema in the context's library."""
    keyword = 'format'

    def validate(self, context, data):
        name = data.schema.get(self.keyword)
        attribute = context.library.format_attribute_for(name)
        if attribute is None:
            context.report(data, self.keyword, 'format_unknown', level=LogLevel.WARNING, format=name)
            return
        if node_type(data.instance) in attribute.types:
            attribute.validate(context, data)
