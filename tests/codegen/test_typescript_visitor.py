from __future__ import annotations

from modelgen.codegen import GenerationParameters, TypeScriptVisitor
from modelgen.core.registry import ModelRegistry
from modelgen.core.system import RESERVED_NAMESPACE
from modelgen.writer import InMemoryWriter

HR = "org.acme.hr@1.0.0"
PAYROLL = "org.acme.payroll@1.0.0"


def _payload() -> dict:
    return {
        "namespace": HR,
        "declarations": [
            {"kind": "enum", "name": "Department", "values": ["ENGINEERING", "SALES"]},
            {"kind": "scalar", "name": "EmployeeId", "type": "String", "regex": "^E[0-9]+$"},
            {
                "kind": "concept",
                "name": "Address",
                "properties": [
                    {"name": "street", "type": "String"},
                    {"name": "city", "type": "String"},
                ],
            },
            {
                "kind": "participant",
                "name": "Person",
                "identified_by": "email",
                "properties": [
                    {"name": "email", "type": "String"},
                    {"name": "address", "type": "Address", "optional": True},
                    {"name": "manager", "type": "Person", "relationship": True, "optional": True},
                    {"name": "tags", "type": "String", "array": True},
                ],
            },
            {
                "kind": "participant",
                "name": "Employee",
                "super_type": "Person",
                "properties": [
                    {"name": "department", "type": "Department"},
                    {"name": "employeeId", "type": "EmployeeId"},
                    {"name": "startedAt", "type": "DateTime"},
                    {
                        "name": "extra",
                        "type": "String",
                        "optional": True,
                        "decorators": [
                            {
                                "name": "CodeGen_TypeScript_Override",
                                "arguments": ["Record<string, unknown>"],
                            }
                        ],
                    },
                ],
            },
            {"kind": "map", "name": "Directory", "key": "String", "value": "Person"},
        ],
    }


def _payroll_payload() -> dict:
    return {
        "namespace": PAYROLL,
        "imports": [{"namespace": HR, "types": ["Employee"]}],
        "declarations": [
            {
                "kind": "concept",
                "name": "Payslip",
                "properties": [
                    {"name": "employee", "type": "Employee", "relationship": True},
                    {"name": "amount", "type": "Double"},
                ],
            },
        ],
    }


def _generate(
    *models: dict,
    module_import_path: str = "./concerto",
    include_reserved: bool = False,
) -> dict[str, str]:
    registry = ModelRegistry()
    registry.add_models(list(models))
    if not include_reserved:
        registry.delete_model(RESERVED_NAMESPACE)
    sink = InMemoryWriter()
    params = GenerationParameters(
        output_sink=sink,
        module_import_path=module_import_path,
        include_reserved_definitions=include_reserved,
    )
    registry.accept(TypeScriptVisitor(), params)
    return sink.get_files_in_memory()


def test_one_file_per_namespace() -> None:
    files = _generate(_payload(), _payroll_payload())

    assert sorted(files) == [f"{HR}.ts", f"{PAYROLL}.ts"]


def test_file_header_and_reserved_imports() -> None:
    text = _generate(_payload())[f"{HR}.ts"]

    assert text.startswith(
        "/* eslint-disable @typescript-eslint/no-empty-interface */\n"
        f"// Generated code for namespace: {HR}\n"
        "\n"
        "// imports\n"
        "import type { IConcept, IParticipant } from './concerto';\n"
        "\n"
        "// interfaces\n"
    )


def test_interfaces_properties_and_unions() -> None:
    text = _generate(_payload())[f"{HR}.ts"]

    assert (
        "export interface IPerson extends IParticipant {\n"
        "    email: string;\n"
        "    address?: IAddress;\n"
        "    manager?: IPerson;\n"
        "    tags: string[];\n"
        "}\n"
        "\n"
        "export type PersonUnion = IEmployee;\n"
    ) in text
    assert "export interface IEmployee extends IPerson {\n" in text
    assert "    department: Department;\n" in text
    assert "    employeeId: EmployeeId;\n" in text
    assert "    startedAt: Date;\n" in text
    assert "$class" not in text


def test_enums_scalars_and_maps() -> None:
    text = _generate(_payload())[f"{HR}.ts"]

    assert (
        "export enum Department {\n"
        "    ENGINEERING = 'ENGINEERING',\n"
        "    SALES = 'SALES',\n"
        "}\n"
    ) in text
    assert "export type EmployeeId = string;\n" in text
    assert "export type Directory = Record<string, IPerson>;\n" in text


def test_override_decorator_replaces_property_type() -> None:
    text = _generate(_payload())[f"{HR}.ts"]

    assert "    extra?: Record<string, unknown>;\n" in text


def test_override_decorator_on_map() -> None:
    payload = {
        "namespace": "org.acme.maps@1.0.0",
        "declarations": [
            {
                "kind": "map",
                "name": "Bag",
                "key": "String",
                "value": "String",
                "decorators": [
                    {"name": "CodeGen_TypeScript_Override", "arguments": ["Map<string, string>"]}
                ],
            }
        ],
    }

    text = _generate(payload)["org.acme.maps@1.0.0.ts"]
    assert "export type Bag = Map<string, string>;\n" in text


def test_cross_namespace_imports_use_namespace_files() -> None:
    text = _generate(_payload(), _payroll_payload())[f"{PAYROLL}.ts"]

    assert "import type { IConcept } from './concerto';\n" in text
    assert f"import type {{ IEmployee }} from './{HR}';\n" in text
    assert text.index("'./concerto'") < text.index(f"'./{HR}'")
    assert "    employee: IEmployee;\n" in text
    assert "    amount: number;\n" in text


def test_module_import_path_is_used_verbatim() -> None:
    text = _generate(_payload(), module_import_path="@acme/runtime/concerto")[f"{HR}.ts"]

    assert "import type { IConcept, IParticipant } from '@acme/runtime/concerto';\n" in text
    assert "'./concerto'" not in text


def test_reserved_definitions_emitted_on_request() -> None:
    files = _generate(_payload(), include_reserved=True)

    assert sorted(files) == [f"{RESERVED_NAMESPACE}.ts", f"{HR}.ts"]
    reserved = files[f"{RESERVED_NAMESPACE}.ts"]
    assert "export interface IConcept {\n    $class?: string;\n}\n" in reserved
    assert "export interface IAsset extends IConcept {\n    $identifier: string;\n}\n" in reserved
    assert f"import type {{ IAddress, IPerson }} from './{HR}';\n" in reserved
    assert f"import type {{ IConcept, IParticipant }} from './{RESERVED_NAMESPACE}';\n" in files[
        f"{HR}.ts"
    ]


def test_output_is_deterministic() -> None:
    assert _generate(_payload(), _payroll_payload()) == _generate(
        _payroll_payload(), _payload()
    )


def _address_model(namespace: str) -> dict:
    return {
        "namespace": namespace,
        "declarations": [
            {
                "kind": "concept",
                "name": "Address",
                "properties": [{"name": "street", "type": "String"}],
            },
        ],
    }


def test_clashing_imported_names_are_aliased() -> None:
    sites = {
        "namespace": "org.c@1.0.0",
        "imports": [{"namespace": "org.a@1.0.0", "types": ["Address"]}],
        "declarations": [
            {
                "kind": "concept",
                "name": "Site",
                "properties": [
                    {"name": "home", "type": "Address"},
                    {"name": "work", "type": "org.b@1.0.0.Address", "array": True},
                ],
            },
        ],
    }
    files = _generate(
        _address_model("org.a@1.0.0"), _address_model("org.b@1.0.0"), sites
    )
    text = files["org.c@1.0.0.ts"]

    assert "import type { IAddress as IAddress_org_a_v1_0_0 } from './org.a@1.0.0';\n" in text
    assert "import type { IAddress as IAddress_org_b_v1_0_0 } from './org.b@1.0.0';\n" in text
    assert "    home: IAddress_org_a_v1_0_0;\n" in text
    assert "    work: IAddress_org_b_v1_0_0[];\n" in text


def test_imported_name_clashing_with_local_declaration_is_aliased() -> None:
    local = {
        "namespace": "org.b@1.0.0",
        "declarations": [
            {
                "kind": "concept",
                "name": "Address",
                "super_type": "org.a@1.0.0.Address",
                "properties": [{"name": "unit", "type": "String"}],
            },
        ],
    }
    text = _generate(_address_model("org.a@1.0.0"), local)["org.b@1.0.0.ts"]

    assert "import type { IAddress as IAddress_org_a_v1_0_0 } from './org.a@1.0.0';\n" in text
    assert "export interface IAddress extends IAddress_org_a_v1_0_0 {\n" in text
    assert "IConcept" not in text


def test_union_members_from_other_files_use_aliases() -> None:
    base = {
        "namespace": "org.a@1.0.0",
        "declarations": [
            {"kind": "concept", "name": "Address", "abstract": True, "properties": []},
        ],
    }
    local = {
        "namespace": "org.b@1.0.0",
        "declarations": [
            {
                "kind": "concept",
                "name": "Address",
                "super_type": "org.a@1.0.0.Address",
                "properties": [],
            },
        ],
    }
    text = _generate(base, local)["org.a@1.0.0.ts"]

    assert "import type { IAddress as IAddress_org_b_v1_0_0 } from './org.b@1.0.0';\n" in text
    assert "export type AddressUnion = IAddress_org_b_v1_0_0;\n" in text
