from datetime import date

from pydantic import BaseModel, model_validator

from fleet.domain.choices import OTHER_DOCUMENT_TYPE, DocumentType, EntityKind
from fleet.schemas.common import NonBlank, PageMeta


def check_custom_type(document_type: str | None, custom_description: str | None) -> str | None:
    """Return the description to store; ``other`` needs one, the rest never keep one."""
    if document_type != OTHER_DOCUMENT_TYPE:
        return None
    if not custom_description or not custom_description.strip():
        raise ValueError("custom_document_type_description is required when document_type is 'other'")
    return custom_description.strip()


class DocumentCreate(BaseModel):
    document_name: NonBlank
    document_type: DocumentType
    custom_document_type_description: str | None = None
    description: str | None = None
    entity_type: EntityKind
    entity_id: NonBlank
    issue_date: date | None = None
    expiration_date: date | None = None
    issuing_authority: str | None = None
    document_number: str | None = None
    notes: str | None = None

    @model_validator(mode="after")
    def custom_type_description(self):
        self.custom_document_type_description = check_custom_type(
            self.document_type, self.custom_document_type_description
        )
        return self


class DocumentUpdate(BaseModel):
    document_name: NonBlank | None = None
    document_type: DocumentType | None = None
    custom_document_type_description: str | None = None
    description: str | None = None
    entity_type: EntityKind | None = None
    entity_id: NonBlank | None = None
    issue_date: date | None = None
    expiration_date: date | None = None
    issuing_authority: str | None = None
    document_number: str | None = None
    notes: str | None = None


class DocumentResponse(BaseModel):
    id: str
    document_name: str
    document_type: str
    custom_document_type_description: str | None
    description: str | None
    entity_type: str
    entity_id: str
    entity_label: str
    issue_date: str | None
    expiration_date: str | None
    status_validity: str
    issuing_authority: str | None
    document_number: str | None
    file_name: str | None
    file_size: int | None
    file_type: str | None
    has_file: bool
    notes: str | None
    created_at: str
    updated_at: str


class DocumentListResponse(PageMeta):
    documents: list[DocumentResponse]


class FileUrlResponse(BaseModel):
    url: str
    expires_in_seconds: int
