"""
Quill AST-based binding backend.

Walks the WebIDL definitions in schema order and builds the declarations
of a Quill module: structs, casts, conversions, external functions and
constant values.
"""

from __future__ import annotations

import logging

from ...errors import BindingError
from ...utils import snake_to_pascal_case, to_snake_case, variable_name
from ..analyzer import MarshallingSynthesizer, MemberResolver, OverloadMangler, SymbolTable, TypeMapper
from ..analyzer.marshalling import Marshaller
from ..config import CodeGeneratorConfig
from ..schema_ast.nodes import (
    Argument,
    AttributeMember,
    CallbackDefinition,
    CallbackInterfaceDefinition,
    ConstantMember,
    ConstructorMember,
    Definition,
    DictionaryDefinition,
    EnumDefinition,
    FieldMember,
    GenericKind,
    IncludesDefinition,
    InterfaceDefinition,
    MemberedDefinition,
    MixinDefinition,
    OperationMember,
    PrimitiveKind,
    SchemaTree,
    Special,
    TypedefDefinition,
    TypeRef,
    UnsupportedDefinition,
    ValueLiteral,
)
from .base import AstBackend
from .emission import EmissionRecord
from .quill_ast_nodes import (
    QuillComment,
    QuillDeclaration,
    QuillExternalFunction,
    QuillFunction,
    QuillModule,
    QuillParameter,
    QuillStruct,
    QuillValue,
)
from .quill_serializer import QuillSerializer

logger = logging.getLogger(__name__)

NO_MANIPULATION_DOC = "This does not involve manipulating the object or reference."

# Attribute tags bound as plain getters and setters
PLAIN_ATTRIBUTE_SPECIALS = (Special.NONE, Special.STATIC, Special.STRINGIFIER, Special.INHERIT)


class QuillAstBackend(AstBackend):
    """Quill binding backend using a custom AST."""

    FILE_EXTENSION = "quill"

    def __init__(self, config: CodeGeneratorConfig):
        super().__init__(config)
        self.serializer = QuillSerializer()
        self._reset(SymbolTable())

    def _reset(self, symbols: SymbolTable) -> None:
        """Create the per-run analysis state."""
        mutable = self.config.mutable_references
        self.symbols = symbols
        self.resolver = MemberResolver(symbols)
        self.mapper = TypeMapper(symbols, mutable=mutable)
        self.mangler = OverloadMangler(symbols, mutable=mutable)
        self.marshalling = MarshallingSynthesizer(symbols, self.mapper)
        self.emitted = EmissionRecord()

    def generate(self, tree: SchemaTree, module_name: str, generation_comment: str = "") -> str:
        """Generate Quill source code for a definition tree."""
        module = self.build_module(tree, module_name, generation_comment)
        return self.serializer.serialize(module)

    def build_module(self, tree: SchemaTree, module_name: str, generation_comment: str = "") -> QuillModule:
        """
        Build the Quill module for a definition tree.

        Definitions are visited in schema order. A definition that cannot be
        bound is logged and skipped; anything it emitted is forgotten.

        Args:
            tree: The parsed definitions of all fragments
            module_name: Name of the generated module
            generation_comment: Comment placed above the module header

        Returns:
            Module AST ready for serialization
        """
        self._reset(SymbolTable.build(tree.definitions))
        module = QuillModule(
            name=module_name,
            generation_comment=generation_comment,
            host_module=self.config.host_module,
        )

        for definition in tree.definitions:
            if definition.name and definition.name in self.config.ignore_definitions:
                logger.info(f"Ignoring definition '{definition.name}'")
                continue
            savepoint = self.emitted.savepoint()
            try:
                declarations = self._generate_definition(definition)
            except BindingError as e:
                logger.error(f"Skipping definition '{definition.name}': {e}")
                self.emitted.rollback(savepoint)
                continue
            module.declarations.extend(declarations)

        logger.info(f"Built module '{module_name}' with {len(module.declarations)} declarations")
        return module

    def translate_type(self, type_ref: TypeRef | None) -> str:
        return self.mapper.map_type(type_ref)

    def format_default_value(self, value: ValueLiteral, type_ref: TypeRef) -> str:
        """
        Format a default or constant literal as a Quill expression.

        `null` is always the empty option; any other literal of a nullable
        type is wrapped in `Option::Some`.
        """
        if value.type == "null":
            return "Option::None"
        literal = self._format_literal(value)
        if type_ref.primitive in (PrimitiveKind.ANY, PrimitiveKind.OBJECT):
            literal = f"{literal} |> as_js()"
        if type_ref.nullable:
            return f"Option::Some({literal})"
        return literal

    def _format_literal(self, value: ValueLiteral) -> str:
        if value.type == "string":
            return f'"{self.serializer.escape_string(str(value.value))}"'
        if value.type == "number":
            text = str(value.value)
            if text.lstrip("-").lower().startswith("0x"):
                return str(int(text, 16))
            return text
        if value.type == "boolean":
            return "true" if value.value in (True, "true") else "false"
        if value.type == "Infinity":
            return "Float::NEG_INF" if value.negative else "Float::INF"
        if value.type == "NaN":
            return "Float::NAN"
        if value.type == "sequence":
            return "List::empty()"
        if value.type == "dictionary":
            logger.warning("Default values of type 'dictionary' are not implemented, using Option::None")
            return "Option::None"
        raise BindingError(str(value.value), f"unknown literal type '{value.type}'")

    # Definitions

    def _generate_definition(self, definition: Definition) -> list[QuillDeclaration]:
        """Dispatch a definition to the generator of its kind."""
        if isinstance(definition, (MixinDefinition, IncludesDefinition, TypedefDefinition, CallbackDefinition)):
            # Bound where they are used: member flattening and type mapping
            return []
        if isinstance(definition, UnsupportedDefinition):
            logger.warning(f"Definitions of type '{definition.type_name}' are not implemented")
            return [QuillComment(text=f"Definitions of type '{definition.type_name}' are not supported: {definition.name}")]

        # Partial and repeated definitions are all bound through the first visit
        canonical = self.symbols.get(definition.name) or definition
        if not self.emitted.claim(canonical.name):
            return []

        if isinstance(canonical, DictionaryDefinition):
            return self._generate_dictionary(canonical)
        if isinstance(canonical, InterfaceDefinition):
            return self._generate_interface(canonical) + self._generate_constants(canonical)
        if isinstance(canonical, CallbackInterfaceDefinition):
            return self._generate_constants(canonical)
        if isinstance(canonical, EnumDefinition):
            return self._generate_enum(canonical)
        return []

    def _unique(self, owner: str, declarations: list[QuillDeclaration]) -> list[QuillDeclaration]:
        """Keep the first declaration of every `Owner::name` path."""
        unique: list[QuillDeclaration] = []
        for declaration in declarations:
            if isinstance(declaration, (QuillExternalFunction, QuillFunction, QuillValue)):
                if not self.emitted.claim(owner, declaration.name):
                    continue
            unique.append(declaration)
        return unique

    def _generate_dictionary(self, dictionary: DictionaryDefinition) -> list[QuillDeclaration]:
        name = dictionary.name
        fields = [m for m in self.resolver.resolve(dictionary) if isinstance(m, FieldMember)]

        declarations: list[QuillDeclaration] = [
            QuillStruct(
                name=name,
                fields=[QuillParameter(name=variable_name(f.name), type_name=self._field_type(f)) for f in fields],
            ),
            self._dictionary_default(name, fields),
        ]

        # Dictionaries only cast to their direct base
        for base in self.resolver.ancestors(dictionary)[:1]:
            declarations.extend(self._upcasts(name, base.name))
            declarations.extend(self._unchecked_downcasts(name, base.name))

        from_js = ["const r = {};"]
        as_js = ["const r = {};"]
        for f in fields:
            plan = self._field_plan(f)
            field_name = variable_name(f.name)
            from_js.append(f"r.{field_name} = {plan.decode(f'#var(value).{f.name}')};")
            as_js.append(f"r.{f.name} = {plan.encode(f'#var(self).{field_name}')};")
        from_js.append("return r;")
        as_js.append("return r;")

        declarations.append(
            QuillExternalFunction(
                owner=name,
                name="from_js",
                parameters=[QuillParameter(name="value", type_name="JsValue")],
                return_type=f"mut {name}",
                body=from_js,
            )
        )
        declarations.append(
            QuillExternalFunction(
                owner=name,
                name="as_js",
                parameters=[QuillParameter(name="self", type_name=name)],
                return_type="JsValue",
                body=as_js,
            )
        )
        return self._unique(name, declarations)

    def _is_optional_field(self, field: FieldMember) -> bool:
        # Nullable fields are already options
        return not field.required and not field.type_ref.nullable

    def _field_type(self, field: FieldMember) -> str:
        type_name = self.mapper.map_type(field.type_ref)
        if self._is_optional_field(field):
            return f"Option[{type_name}]"
        return type_name

    def _field_plan(self, field: FieldMember) -> Marshaller:
        if field.required:
            return self.marshalling.plan(field.type_ref)
        return self.marshalling.plan(field.type_ref.as_nullable())

    def _dictionary_default(self, name: str, fields: list[FieldMember]) -> QuillFunction:
        """`default` constructor taking every required field without a default."""
        parameters: list[QuillParameter] = []
        values: list[str] = []
        for f in fields:
            field_name = variable_name(f.name)
            if f.default is None:
                if f.required and not f.type_ref.nullable:
                    parameters.append(QuillParameter(name=field_name, type_name=self._field_type(f)))
                    values.append(field_name)
                else:
                    values.append("Option::None")
                continue
            value = self.format_default_value(f.default, f.type_ref)
            if self._is_optional_field(f) and f.default.type not in ("null", "dictionary"):
                value = f"Option::Some({value})"
            values.append(value)

        return QuillFunction(
            owner=name,
            name="default",
            parameters=parameters,
            return_type=f"mut {name}",
            expression=f"{name}({', '.join(values)})",
            inline_body=False,
        )

    def _generate_interface(self, interface: InterfaceDefinition) -> list[QuillDeclaration]:
        name = interface.name
        members = self.resolver.resolve(interface)
        declarations: list[QuillDeclaration] = [QuillStruct(name=name, is_public=False)]

        for base in self.resolver.ancestors(interface):
            declarations.extend(self._upcasts(name, base.name))
            declarations.extend(self._checked_downcasts(name, base.name))

        for member in members:
            if isinstance(member, ConstructorMember):
                declarations.append(self._generate_constructor(name, member))

        for member in members:
            if isinstance(member, AttributeMember):
                declarations.extend(self._generate_attribute(name, member))

        operations = [m for m in members if isinstance(m, OperationMember)]
        for operation in operations:
            group_size = sum(1 for o in operations if o.name == operation.name and o.special == operation.special)
            declarations.extend(self._generate_operation(name, operation, group_size))

        declarations.append(
            QuillFunction(
                owner=name,
                name="as_js",
                parameters=[QuillParameter(name="self", type_name=name)],
                return_type="JsValue",
                expression=f"JsValue::unsafe_from[{name}](self)",
            )
        )
        declarations.append(
            QuillFunction(
                owner=name,
                name="from_js",
                parameters=[QuillParameter(name="v", type_name="JsValue")],
                return_type=f"mut {name}",
                expression=f"JsValue::unsafe_as[mut {name}](v)",
            )
        )
        return self._unique(name, declarations)

    def _generate_constants(self, definition: MemberedDefinition) -> list[QuillDeclaration]:
        values: list[QuillDeclaration] = []
        for member in self.resolver.resolve(definition):
            if not isinstance(member, ConstantMember):
                continue
            values.append(
                QuillValue(
                    owner=definition.name,
                    name=member.name,
                    type_name=self.translate_type(member.type_ref),
                    value=self.format_default_value(member.value, member.type_ref),
                )
            )
        return self._unique(definition.name, values)

    def _generate_enum(self, enum: EnumDefinition) -> list[QuillDeclaration]:
        values: list[QuillDeclaration] = []
        for value in enum.values:
            values.append(
                QuillValue(
                    owner=enum.name,
                    name=self.enum_value_name(value),
                    type_name="String",
                    value=f'"{self.serializer.escape_string(value)}"',
                )
            )
        return self._unique(enum.name, values)

    @staticmethod
    def enum_value_name(value: str) -> str:
        """PascalCase Quill name of an enum value (`south-east` -> `SouthEast`)."""
        name = snake_to_pascal_case(value)
        if not name:
            return "Empty"
        if name[0].isdigit():
            return f"Value{name}"
        return name

    # Casts

    def _upcasts(self, name: str, base: str) -> list[QuillDeclaration]:
        base_sc = to_snake_case(base)
        return [
            QuillExternalFunction(
                docs=[f"Converts a reference to '{name}' to a reference to '{base}'.", NO_MANIPULATION_DOC],
                owner=name,
                name=f"as_{base_sc}",
                parameters=[QuillParameter(name="self", type_name=name)],
                return_type=base,
                body=["return #var(self);"],
                inline_body=True,
            ),
            QuillExternalFunction(
                docs=[
                    f"Converts a mutable reference to '{name}' to a mutable reference to '{base}'.",
                    NO_MANIPULATION_DOC,
                ],
                owner=name,
                name=f"as_m{base_sc}",
                parameters=[QuillParameter(name="self", type_name=f"mut {name}")],
                return_type=f"mut {base}",
                body=["return #var(self);"],
                inline_body=True,
            ),
        ]

    def _checked_downcasts(self, name: str, base: str) -> list[QuillDeclaration]:
        base_sc = to_snake_case(base)
        failure = (
            f"The conversion may fail and panic if 'base' is not a reference to '{name}' "
            "or if the given instance is user-implemented."
        )
        body = [
            f"if(#var(base) instanceof {name}) {{ return #var(base); }}",
            f"#fun(panic[Unit])(\"Failed to downcast '{base}' to '{name}'!\");",
        ]
        return [
            QuillExternalFunction(
                docs=[f"Attempts to convert a reference to '{base}' to a reference to '{name}'.", failure, NO_MANIPULATION_DOC],
                owner=name,
                name=f"from_{base_sc}",
                parameters=[QuillParameter(name="base", type_name=base)],
                return_type=name,
                body=body,
            ),
            QuillExternalFunction(
                docs=[
                    f"Attempts to convert a mutable reference to '{base}' to a mutable reference to '{name}'.",
                    failure,
                    NO_MANIPULATION_DOC,
                ],
                owner=name,
                name=f"from_m{base_sc}",
                parameters=[QuillParameter(name="base", type_name=f"mut {base}")],
                return_type=f"mut {name}",
                body=body,
            ),
        ]

    def _unchecked_downcasts(self, name: str, base: str) -> list[QuillDeclaration]:
        base_sc = to_snake_case(base)
        undefined = f"A 'base' that is not a reference to '{name}' RESULTS IN UNDEFINED BEHAVIOR."
        return [
            QuillExternalFunction(
                docs=[f"Attempts to convert a reference to '{base}' to a reference to '{name}'.", undefined, NO_MANIPULATION_DOC],
                owner=name,
                name=f"from_{base_sc}_unchecked",
                parameters=[QuillParameter(name="base", type_name=base)],
                return_type=name,
                body=["return #var(base);"],
                inline_body=True,
            ),
            QuillExternalFunction(
                docs=[
                    f"Attempts to convert a mutable reference to '{base}' to a mutable reference to '{name}'.",
                    undefined,
                    NO_MANIPULATION_DOC,
                ],
                owner=name,
                name=f"from_m{base_sc}_unchecked",
                parameters=[QuillParameter(name="base", type_name=f"mut {base}")],
                return_type=f"mut {name}",
                body=["return #var(base);"],
                inline_body=True,
            ),
        ]

    # Interface members

    def _parameters(self, arguments: list[Argument]) -> list[QuillParameter]:
        parameters = []
        for argument in arguments:
            type_name = self.mapper.map_type(argument.type_ref)
            if argument.variadic:
                type_name = f"List[{type_name}]"
            parameters.append(
                QuillParameter(name=variable_name(argument.name), type_name=type_name, variadic=argument.variadic)
            )
        return parameters

    def _argument_to_js(self, argument: Argument) -> str:
        value = f"#var({variable_name(argument.name)})"
        if not argument.variadic:
            return self.marshalling.encode(argument.type_ref, value)
        sequence = TypeRef(name="sequence", generic=GenericKind.SEQUENCE, arguments=[argument.type_ref])
        return f"...{self.marshalling.encode(sequence, value)}"

    def _arguments_to_js(self, arguments: list[Argument]) -> str:
        return ", ".join(self._argument_to_js(a) for a in arguments)

    def _generate_constructor(self, owner: str, constructor: ConstructorMember) -> QuillExternalFunction:
        if constructor.arguments:
            name = f"from_{self.mangler.suffix(constructor.arguments)}"
        else:
            name = "new"
        return QuillExternalFunction(
            owner=owner,
            name=name,
            parameters=self._parameters(constructor.arguments),
            return_type=f"mut {owner}",
            body=[f"return new {owner}({self._arguments_to_js(constructor.arguments)});"],
        )

    def _generate_attribute(self, owner: str, attribute: AttributeMember) -> list[QuillDeclaration]:
        if attribute.special not in PLAIN_ATTRIBUTE_SPECIALS:
            logger.warning(f"Unhandled special attribute type '{attribute.special.value}' on '{owner}.{attribute.name}'")

        is_static = attribute.special == Special.STATIC
        accessed = owner if is_static else "#var(self)"
        value = f"{accessed}.{attribute.name}"
        value_type = self.mapper.map_type(attribute.type_ref)
        name = to_snake_case(attribute.name)

        getter_parameters = [] if is_static else [QuillParameter(name="self", type_name=owner)]
        declarations: list[QuillDeclaration] = [
            QuillExternalFunction(
                owner=owner,
                name=name,
                parameters=getter_parameters,
                return_type=value_type,
                body=[f"return {self.marshalling.decode(attribute.type_ref, value)};"],
            )
        ]
        if not attribute.readonly:
            setter_parameters = [] if is_static else [QuillParameter(name="self", type_name=f"mut {owner}")]
            setter_parameters.append(QuillParameter(name="value", type_name=value_type))
            declarations.append(
                QuillExternalFunction(
                    owner=owner,
                    name=f"set_{name}",
                    parameters=setter_parameters,
                    body=[f"{value} = {self.marshalling.encode(attribute.type_ref, '#var(value)')};"],
                )
            )
        return declarations

    def _return_value(self, operation: OperationMember) -> tuple[str, str]:
        """Quill return type and decoded value of the JavaScript result `r`."""
        if operation.return_type is None:
            return "Unit", "undefined"
        return self.mapper.map_type(operation.return_type), self.marshalling.decode(operation.return_type, "r")

    def _generate_operation(self, owner: str, operation: OperationMember, group_size: int) -> list[QuillDeclaration]:
        """
        Bind one operation according to its special tag.

        Named getters, setters and deleters are plain methods; the unnamed
        forms index the object with their key argument.

        Raises:
            BindingError: If an unnamed special lacks its key or value argument
        """
        special = operation.special
        return_type, return_value = self._return_value(operation)

        def mangled(base_name: str) -> str:
            return self.mangler.mangled_name(base_name, operation, group_size)

        if special == Special.STRINGIFIER and not operation.name:
            if operation.return_type is None:
                return_type, return_value = "String", "r"
            return [self._method(owner, "as_string", "toString", operation, return_type, return_value)]

        if special in (Special.NONE, Special.STRINGIFIER) or (
            special in (Special.GETTER, Special.SETTER, Special.DELETER) and operation.name
        ):
            name = mangled(to_snake_case(operation.name))
            return [self._method(owner, name, operation.name, operation, return_type, return_value)]

        if special == Special.STATIC:
            return [
                QuillExternalFunction(
                    owner=owner,
                    name=mangled(to_snake_case(operation.name)),
                    parameters=self._parameters(operation.arguments),
                    return_type=return_type,
                    body=[
                        f"const r = {owner}.{operation.name}({self._arguments_to_js(operation.arguments)});",
                        f"return {return_value};",
                    ],
                )
            ]

        if special == Special.GETTER:
            key = self._indexing_arguments(owner, operation, 1)[0]
            return [
                QuillExternalFunction(
                    owner=owner,
                    name=mangled("get"),
                    parameters=[QuillParameter(name="__self", type_name=owner), *self._parameters(operation.arguments)],
                    return_type=return_type,
                    body=[f"const r = #var(__self)[{key}];", f"return {return_value};"],
                )
            ]

        if special == Special.SETTER:
            key, value = self._indexing_arguments(owner, operation, 2)
            return [
                QuillExternalFunction(
                    owner=owner,
                    name=mangled("set"),
                    parameters=self._receiver(owner, operation.arguments),
                    body=[f"#var(__self)[{key}] = {value};"],
                )
            ]

        if special == Special.DELETER:
            key = self._indexing_arguments(owner, operation, 1)[0]
            return [
                QuillExternalFunction(
                    owner=owner,
                    name=mangled("remove"),
                    parameters=self._receiver(owner, operation.arguments),
                    body=[f"delete #var(__self)[{key}];"],
                )
            ]

        logger.warning(f"Unhandled special operation type '{special.value}' on '{owner}.{operation.name}'")
        return []

    def _receiver(self, owner: str, arguments: list[Argument]) -> list[QuillParameter]:
        return [QuillParameter(name="__self", type_name=f"mut {owner}"), *self._parameters(arguments)]

    def _method(
        self,
        owner: str,
        name: str,
        js_name: str,
        operation: OperationMember,
        return_type: str,
        return_value: str,
    ) -> QuillExternalFunction:
        return QuillExternalFunction(
            owner=owner,
            name=name,
            parameters=self._receiver(owner, operation.arguments),
            return_type=return_type,
            body=[
                f"const r = #var(__self).{js_name}({self._arguments_to_js(operation.arguments)});",
                f"return {return_value};",
            ],
        )

    def _indexing_arguments(self, owner: str, operation: OperationMember, count: int) -> list[str]:
        """Encoded key (and value) arguments of an unnamed getter, setter or deleter."""
        if len(operation.arguments) < count:
            raise BindingError(
                owner,
                f"unnamed {operation.special.value} needs {count} argument(s), got {len(operation.arguments)}",
            )
        return [self._argument_to_js(a) for a in operation.arguments[:count]]
