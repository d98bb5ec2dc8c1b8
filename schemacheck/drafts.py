"""The built-in keyword libraries, one per supported draft."""

from schemacheck import formats
from schemacheck import keywords as kv
from schemacheck import syntax as sx
from schemacheck.constants import (ALL_TYPES, ARRAY, BOOLEAN, DRAFTV3_URI, DRAFTV4_URI,
                                   DRAFTV6_URI, NUMBER, OBJECT, STRING)
from schemacheck.digest import (AdditionalItemsDigester, AdditionalPropertiesDigester,
                                DependenciesDigester, DraftV3PropertiesDigester,
                                DraftV3TypeDigester, DraftV4TypeDigester, NullDigester,
                                NumericLimitDigester, RequiredDigester, SimpleDigester,
                                array, numeric, object_, string)
from schemacheck.library import Library, LibraryBuilder


def _common_keywords(builder: LibraryBuilder) -> LibraryBuilder:
    builder.add_keyword('$schema', sx.URISyntaxChecker('$schema', absolute=True))
    builder.add_keyword('$ref', sx.URISyntaxChecker('$ref'))
    builder.add_keyword('title', sx.SyntaxChecker('title', STRING))
    builder.add_keyword('description', sx.SyntaxChecker('description', STRING))
    builder.add_keyword('default', sx.SyntaxChecker('default', *ALL_TYPES))
    builder.add_keyword('format', sx.SyntaxChecker('format', STRING),
                        NullDigester('format'), kv.FormatValidator)
    # arrays
    builder.add_keyword('additionalItems', sx.AdditionalSyntaxChecker('additionalItems'),
                        AdditionalItemsDigester(), kv.AdditionalItemsValidator)
    builder.add_keyword('items', sx.SchemaOrSchemaArraySyntaxChecker('items'))
    builder.add_keyword('minItems', sx.NaturalNumberSyntaxChecker('minItems'),
                        array('minItems'), kv.MinItemsValidator)
    builder.add_keyword('maxItems', sx.NaturalNumberSyntaxChecker('maxItems'),
                        array('maxItems'), kv.MaxItemsValidator)
    builder.add_keyword('uniqueItems', sx.SyntaxChecker('uniqueItems', BOOLEAN),
                        array('uniqueItems'), kv.UniqueItemsValidator)
    # numbers
    builder.add_keyword('minimum', sx.SyntaxChecker('minimum', NUMBER),
                        NumericLimitDigester('minimum', 'exclusiveMinimum'), kv.MinimumValidator)
    builder.add_keyword('exclusiveMinimum', sx.ExclusiveLimitSyntaxChecker('exclusiveMinimum', 'minimum'))
    builder.add_keyword('maximum', sx.SyntaxChecker('maximum', NUMBER),
                        NumericLimitDigester('maximum', 'exclusiveMaximum'), kv.MaximumValidator)
    builder.add_keyword('exclusiveMaximum', sx.ExclusiveLimitSyntaxChecker('exclusiveMaximum', 'maximum'))
    # objects
    builder.add_keyword('additionalProperties', sx.AdditionalSyntaxChecker('additionalProperties'),
                        AdditionalPropertiesDigester(), kv.AdditionalPropertiesValidator)
    builder.add_keyword('properties', sx.SchemaMapSyntaxChecker('properties'))
    builder.add_keyword('patternProperties', sx.PatternPropertiesSyntaxChecker())
    # strings
    builder.add_keyword('minLength', sx.NaturalNumberSyntaxChecker('minLength'),
                        string('minLength'), kv.MinLengthValidator)
    builder.add_keyword('maxLength', sx.NaturalNumberSyntaxChecker('maxLength'),
                        string('maxLength'), kv.MaxLengthValidator)
    builder.add_keyword('pattern', sx.PatternSyntaxChecker(),
                        NullDigester('pattern', STRING), kv.PatternValidator)
    # all types
    builder.add_keyword('enum', sx.EnumSyntaxChecker(),
                        SimpleDigester('enum'), kv.EnumValidator)
    return builder


def _draftv3() -> Library:
    builder = _common_keywords(LibraryBuilder())
    builder.dialect = DRAFTV3_URI
    builder.id_keyword = 'id'
    builder.add_keyword('id', sx.URISyntaxChecker('id'))
    builder.add_keyword('required', sx.SyntaxChecker('required', BOOLEAN))
    builder.add_keyword('properties', sx.SchemaMapSyntaxChecker('properties'),
                        DraftV3PropertiesDigester(), kv.DraftV3PropertiesValidator)
    builder.add_keyword('dependencies', sx.DependenciesSyntaxChecker(allow_strings=True),
                        DependenciesDigester(), kv.DependenciesValidator)
    builder.add_keyword('divisibleBy', sx.DivisorSyntaxChecker('divisibleBy'),
                        numeric('divisibleBy'), kv.DivisibleByValidator)
    builder.add_keyword('type', sx.DraftV3TypeKeywordSyntaxChecker('type'),
                        DraftV3TypeDigester('type'), kv.DraftV3TypeValidator)
    builder.add_keyword('disallow', sx.DraftV3TypeKeywordSyntaxChecker('disallow'),
                        DraftV3TypeDigester('disallow'), kv.DisallowValidator)
    builder.add_keyword('extends', sx.SchemaOrSchemaArraySyntaxChecker('extends'),
                        NullDigester('extends'), kv.ExtendsValidator)
    for attribute in formats.DRAFTV3_FORMATS:
        builder.add_format_attribute(attribute.name, attribute)
    return builder.freeze()


def _draftv4() -> Library:
    builder = _common_keywords(LibraryBuilder())
    builder.dialect = DRAFTV4_URI
    builder.id_keyword = 'id'
    builder.add_keyword('id', sx.URISyntaxChecker('id'))
    builder.add_keyword('definitions', sx.SchemaMapSyntaxChecker('definitions'))
    builder.add_keyword('required', sx.RequiredSyntaxChecker(),
                        RequiredDigester(), kv.RequiredValidator)
    builder.add_keyword('dependencies', sx.DependenciesSyntaxChecker(),
                        DependenciesDigester(), kv.DependenciesValidator)
    builder.add_keyword('multipleOf', sx.DivisorSyntaxChecker('multipleOf'),
                        numeric('multipleOf'), kv.MultipleOfValidator)
    builder.add_keyword('minProperties', sx.NaturalNumberSyntaxChecker('minProperties'),
                        object_('minProperties'), kv.MinPropertiesValidator)
    builder.add_keyword('maxProperties', sx.NaturalNumberSyntaxChecker('maxProperties'),
                        object_('maxProperties'), kv.MaxPropertiesValidator)
    builder.add_keyword('type', sx.DraftV4TypeSyntaxChecker(),
                        DraftV4TypeDigester(), kv.DraftV4TypeValidator)
    builder.add_keyword('allOf', sx.SchemaArraySyntaxChecker('allOf'),
                        NullDigester('allOf'), kv.AllOfValidator)
    builder.add_keyword('anyOf', sx.SchemaArraySyntaxChecker('anyOf'),
                        NullDigester('anyOf'), kv.AnyOfValidator)
    builder.add_keyword('oneOf', sx.SchemaArraySyntaxChecker('oneOf'),
                        NullDigester('oneOf'), kv.OneOfValidator)
    builder.add_keyword('not', sx.SchemaSyntaxChecker('not'),
                        NullDigester('not'), kv.NotValidator)
    for attribute in formats.DRAFTV4_FORMATS:
        builder.add_format_attribute(attribute.name, attribute)
    return builder.freeze()


def _draftv6(draftv4: Library) -> Library:
    builder = draftv4.thaw()
    builder.dialect = DRAFTV6_URI
    builder.id_keyword = '$id'
    builder.boolean_schemas = True
    builder.remove_keyword('id')
    builder.add_keyword('$id', sx.URISyntaxChecker('$id'))
    builder.add_keyword('examples', sx.SyntaxChecker('examples', ARRAY))
    builder.add_keyword('minimum', sx.SyntaxChecker('minimum', NUMBER),
                        NumericLimitDigester('minimum'), kv.MinimumValidator)
    builder.add_keyword('maximum', sx.SyntaxChecker('maximum', NUMBER),
                        NumericLimitDigester('maximum'), kv.MaximumValidator)
    builder.add_keyword('exclusiveMinimum', sx.SyntaxChecker('exclusiveMinimum', NUMBER),
                        numeric('exclusiveMinimum'), kv.ExclusiveMinimumValidator)
    builder.add_keyword('exclusiveMaximum', sx.SyntaxChecker('exclusiveMaximum', NUMBER),
                        numeric('exclusiveMaximum'), kv.ExclusiveMaximumValidator)
    builder.add_keyword('required', sx.RequiredSyntaxChecker(allow_empty=True),
                        RequiredDigester(), kv.RequiredValidator)
    builder.add_keyword('dependencies', sx.DependenciesSyntaxChecker(allow_empty=True),
                        DependenciesDigester(), kv.DependenciesValidator)
    builder.add_keyword('const', sx.SyntaxChecker('const', *ALL_TYPES),
                        SimpleDigester('const'), kv.ConstValidator)
    builder.add_keyword('contains', sx.SchemaSyntaxChecker('contains'),
                        NullDigester('contains', ARRAY), kv.ContainsValidator)
    builder.add_keyword('propertyNames', sx.SchemaSyntaxChecker('propertyNames'),
                        NullDigester('propertyNames', OBJECT), kv.PropertyNamesValidator)
    for attribute in formats.DRAFTV6_FORMATS:
        builder.add_format_attribute(attribute.name, attribute)
    return builder.freeze()


DRAFTV3_LIBRARY = _draftv3()
DRAFTV4_LIBRARY = _draftv4()
DRAFTV6_LIBRARY = _draftv6(DRAFTV4_LIBRARY)

LIBRARIES = {
    DRAFTV3_URI: DRAFTV3_LIBRARY,
    DRAFTV4_URI: DRAFTV4_LIBRARY,
    DRAFTV6_URI: DRAFTV6_LIBRARY,
}
