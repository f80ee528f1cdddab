"""Document type operations against in-memory SQLite."""

import pytest

from docfill.application.dtos.document_type import (
    DocumentTypeCreate,
    DocumentTypeUpdate,
    FieldDefinitionInput,
)
from docfill.application.dtos.generation import GeneratedDocumentCreate
from docfill.application.use_cases.document_types import DocumentTypeService
from docfill.domain.enums import DataType


def _service(uow, output_store, notifier) -> DocumentTypeService:
    return DocumentTypeService(
        uow.document_types, uow.templates, uow.generated_documents, output_store, notifier
    )


def _fields() -> list[FieldDefinitionInput]:
    return [
        FieldDefinitionInput("Client Name", "client_name", DataType.TEXT, True, "CLIENT_NAME"),
        FieldDefinitionInput(
            "Amount", "amount", DataType.CURRENCY, False, "AMOUNT",
            '{"decimals": 2, "currencySymbol": "₹"}',
        ),
        FieldDefinitionInput("Notes", "notes"),
    ]


@pytest.fixture
async def template_id(database, write_template, para) -> str:
    path = write_template([para("{{ CLIENT_NAME }} {{ AMOUNT }}")])
    async with database.unit_of_work() as uow:
        template = await uow.templates.create_template("Invoice", str(path))
    return template.id


@pytest.mark.requires_db
async def test_create_and_read_back_in_order(
    database, admin, template_id, output_store, notifier
) -> None:
    async with database.unit_of_work() as uow:
        created = await _service(uow, output_store, notifier).create_document_type(
            admin, DocumentTypeCreate("Invoice", template_id, _fields())
        )
    async with database.unit_of_work() as uow:
        service = _service(uow, output_store, notifier)
        found = await service.get_document_type(created.id)
        fields = await service.get_fields(created.id)

    assert found is not None
    assert [f.field_key for f in found.fields] == ["client_name", "amount", "notes"]
    assert [f.position for f in fields] == [0, 1, 2]
    assert fields[1].data_type == "currency"
    assert fields[2].placeholder_mapping is None


@pytest.mark.requires_db
async def test_update_replaces_fields_and_keeps_mapping_reuse(
    database, admin, template_id, output_store, notifier
) -> None:
    async with database.unit_of_work() as uow:
        created = await _service(uow, output_store, notifier).create_document_type(
            admin, DocumentTypeCreate("Invoice", template_id, _fields())
        )
    replacement = [
        FieldDefinitionInput("Customer", "customer", DataType.TEXT, True, "CLIENT_NAME"),
    ]
    async with database.unit_of_work() as uow:
        updated = await _service(uow, output_store, notifier).update_document_type(
            admin, DocumentTypeUpdate(id=created.id, name="Tax Invoice", fields=replacement)
        )
    assert updated.name == "Tax Invoice"
    assert [(f.field_key, f.placeholder_mapping) for f in updated.fields] == [
        ("customer", "CLIENT_NAME")
    ]


@pytest.mark.requires_db
async def test_soft_delete_hides_from_listing(
    database, admin, template_id, output_store, notifier
) -> None:
    async with database.unit_of_work() as uow:
        service = _service(uow, output_store, notifier)
        kept = await service.create_document_type(
            admin, DocumentTypeCreate("Form 16", template_id, _fields())
        )
        dropped = await service.create_document_type(
            admin, DocumentTypeCreate("Invoice", template_id, _fields())
        )
        await service.delete_document_type(admin, dropped.id)

    async with database.unit_of_work() as uow:
        service = _service(uow, output_store, notifier)
        listed = await service.list_document_types()
        hidden = await service.get_document_type(dropped.id)
        still_there = await uow.document_types.get_by_id(dropped.id, include_deleted=True)

    assert [d.id for d in listed] == [kept.id]
    assert hidden is None
    assert still_there is not None and still_there.is_deleted


@pytest.mark.requires_db
async def test_hard_delete_removes_documents_and_files(
    database, admin, template_id, output_store, notifier
) -> None:
    async with database.unit_of_work() as uow:
        created = await _service(uow, output_store, notifier).create_document_type(
            admin, DocumentTypeCreate("Invoice", template_id, _fields())
        )
    draft = await output_store.write_draft("Invoice", b"doc")
    async with database.unit_of_work() as uow:
        await uow.generated_documents.create_document(
            GeneratedDocumentCreate(
                document_type_id=created.id,
                generated_by=admin.id,
                file_path=str(draft.path),
                input_values={"client_name": "Acme"},
            )
        )

    async with database.unit_of_work() as uow:
        await _service(uow, output_store, notifier).delete_document_type(
            admin, created.id, delete_documents=True
        )

    assert not draft.path.exists()
    async with database.unit_of_work() as uow:
        assert await uow.document_types.get_by_id(created.id, include_deleted=True) is None
        assert await uow.document_types.get_fields(created.id) == []
        assert await uow.generated_documents.list_by_document_type(created.id) == []

    await notifier.drain()
    async with database.unit_of_work() as uow:
        actions = [entry.action_type for entry in await uow.activity_logs.list_recent()]
    assert "FORM_DELETE_HARD" in actions
    assert "FORM_CREATE" in actions
