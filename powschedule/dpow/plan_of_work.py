"""
Digital Plan of Work (dPOW) document, as exported by the NBS BIM Toolkit.

Only the parts of the document that end up in a schedule are modelled.
Unknown keys are ignored, so newer dPOW files still validate.

PROMPT> python -m powschedule.dpow.plan_of_work /path/to/file.dpow
"""
import json
import logging
from pathlib import Path
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

logger = logging.getLogger(__name__)

class PlanOfWorkParseError(Exception):
    """Raised when a dPOW file cannot be read or doesn't match the expected structure."""
    pass

class DPoWModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data):
        # .NET serializers write null for empty lists and missing objects, use the field defaults instead.
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data

class Attribute(DPoWModel):
    name: Optional[str] = Field(default=None, alias="Name")
    value: Optional[str] = Field(default=None, alias="Value")

class Responsibility(DPoWModel):
    responsible_contact_id: Optional[UUID] = Field(
        default=None,
        alias="ResponsibleContactId",
        description="Id of the contact in the plan's contact list."
    )

class Job(DPoWModel):
    name: Optional[str] = Field(default=None, alias="Name")
    description: Optional[str] = Field(default=None, alias="Description")
    responsibility: Responsibility = Field(default_factory=Responsibility, alias="Responsibility")

class DeliverableType(DPoWModel):
    """Common shape of the asset, assembly and space deliverables."""
    name: Optional[str] = Field(default=None, alias="Name")
    description: Optional[str] = Field(default=None, alias="Description")
    attributes: list[Attribute] = Field(default_factory=list, alias="Attributes")

class AssetType(DeliverableType):
    pass

class AssemblyType(DeliverableType):
    pass

class SpaceType(DeliverableType):
    pass

class DocumentationSet(DPoWModel):
    name: Optional[str] = Field(default=None, alias="Name")
    description: Optional[str] = Field(default=None, alias="Description")
    attributes: list[Attribute] = Field(default_factory=list, alias="Attributes")
    jobs: list[Job] = Field(default_factory=list, alias="Jobs")

class ProjectStage(DPoWModel):
    name: Optional[str] = Field(default=None, alias="Name")
    description: Optional[str] = Field(default=None, alias="Description")
    attributes: list[Attribute] = Field(default_factory=list, alias="Attributes")
    documentation_set: list[DocumentationSet] = Field(default_factory=list, alias="DocumentationSet")
    asset_types: list[AssetType] = Field(default_factory=list, alias="AssetTypes")
    assembly_types: list[AssemblyType] = Field(default_factory=list, alias="AssemblyTypes")
    space_types: list[SpaceType] = Field(default_factory=list, alias="SpaceTypes")

class Contact(DPoWModel):
    id: UUID = Field(alias="Id")
    given_name: Optional[str] = Field(default=None, alias="GivenName")
    family_name: Optional[str] = Field(default=None, alias="FamilyName")
    company_name: Optional[str] = Field(default=None, alias="CompanyName")
    email: Optional[str] = Field(default=None, alias="Email")

class DPoWProject(DPoWModel):
    name: Optional[str] = Field(default=None, alias="Name")
    description: Optional[str] = Field(default=None, alias="Description")

class PlanOfWork(DPoWModel):
    project: DPoWProject = Field(default_factory=DPoWProject, alias="Project")
    project_stages: list[ProjectStage] = Field(default_factory=list, alias="ProjectStages")
    contacts: list[Contact] = Field(default_factory=list, alias="Contacts")

    def find_contact(self, contact_id: UUID) -> Optional[Contact]:
        """First contact with the given id, or None."""
        for contact in self.contacts:
            if contact.id == contact_id:
                return contact
        return None

    @classmethod
    def open_json(cls, path: str | Path) -> "PlanOfWork":
        """
        Read and validate a dPOW file.

        :raises PlanOfWorkParseError: if the file is missing, unreadable, not JSON, or not a plan of work.
        """
        path = Path(path)
        try:
            # dPOW files written by .NET tools often start with a BOM.
            text = path.read_text(encoding="utf-8-sig")
        except (OSError, UnicodeDecodeError) as e:
            raise PlanOfWorkParseError(f"Unable to read dPOW file {path}: {e}") from e
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise PlanOfWorkParseError(f"Malformed JSON in dPOW file {path}: {e}") from e
        if not isinstance(data, dict):
            raise PlanOfWorkParseError(f"Expected a JSON object at the root of {path}, got {type(data).__name__}")
        try:
            plan = cls.model_validate(data)
        except ValidationError as e:
            raise PlanOfWorkParseError(f"Invalid dPOW structure in {path}: {e}") from e
        logger.debug(f"Loaded dPOW file {path}: {len(plan.project_stages)} stages, {len(plan.contacts)} contacts")
        return plan

if __name__ == "__main__":
    import sys
    logging.basicConfig(level=logging.DEBUG)
    plan = PlanOfWork.open_json(sys.argv[1])
    print(f"Project: {plan.project.name!r}")
    for stage in plan.project_stages:
        print(f"  {stage.name!r}: {len(stage.documentation_set)} document sets")
