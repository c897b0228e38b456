# belajarshafa/services/material_service.py
import logging
import re
from typing import List

from pydantic import AnyUrl, TypeAdapter, ValidationError
from sqlalchemy.orm import Session

from belajarshafa.core.exceptions import BadRequestError, NotFoundError
from belajarshafa.models.enums import MaterialType
from belajarshafa.models.material import Material
from belajarshafa.models.user import User
from belajarshafa.schemas.material import MaterialCreate, MaterialReorderRequest, MaterialUpdate
from belajarshafa.services import ordering
from belajarshafa.services.course_service import ensure_course_owner, ensure_manager
from belajarshafa.services.topic_service import get_topic_or_404

logger = logging.getLogger(__name__)

YOUTUBE_URL_RE = re.compile(r"^(https?://)?(www\.)?(youtube\.com|youtu\.be)/.+$")

_url_adapter = TypeAdapter(AnyUrl)


def validate_content(material_type: MaterialType, content: dict) -> None:
    """Check the fields each material type needs; raise BadRequestError otherwise."""
    material_type = MaterialType(material_type)

    if material_type == MaterialType.VIDEO:
        video_url = content.get("video_url")
        if not video_url:
            raise BadRequestError("Video URL is required for VIDEO material")
        if not YOUTUBE_URL_RE.match(video_url):
            raise BadRequestError("Invalid YouTube URL format")

    elif material_type == MaterialType.DOCUMENT:
        if not content.get("document_url"):
            raise BadRequestError("Document URL is required for DOCUMENT material")

    elif material_type == MaterialType.ARTICLE:
        if not content.get("article_content"):
            raise BadRequestError("Article content is required for ARTICLE material")

    elif material_type == MaterialType.EXTERNAL_LINK:
        external_url = content.get("external_url")
        if not external_url:
            raise BadRequestError("External URL is required for EXTERNAL_LINK material")
        try:
            _url_adapter.validate_python(external_url)
        except ValidationError:
            raise BadRequestError("Invalid URL format")


def _ensure_free_sequence(db: Session, topic_id: int, sequence: int) -> None:
    if ordering.sequence_taken(db, Material, Material.topic_id, topic_id, sequence):
        raise BadRequestError(f"Material with sequence {sequence} already exists in this topic")


def create_material(db: Session, *, actor: User, obj_in: MaterialCreate) -> Material:
    ensure_manager(actor, "Only Managers can create materials")
    topic = get_topic_or_404(db, obj_in.topic_id)
    ensure_course_owner(
        topic.course, actor, "You can only add materials to topics in courses you created"
    )

    content = obj_in.content.model_dump(exclude_none=True)
    validate_content(obj_in.type, content)

    sequence = obj_in.sequence
    if sequence is None:
        sequence = ordering.next_sequence(db, Material.topic_id, topic.id, Material.sequence)
    else:
        _ensure_free_sequence(db, topic.id, sequence)

    material = Material(
        topic_id=topic.id,
        type=obj_in.type,
        title=obj_in.title,
        content=content,
        sequence=sequence,
        estimated_duration=obj_in.estimated_duration,
    )
    db.add(material)
    db.commit()
    db.refresh(material)
    return material


def list_materials(db: Session, *, topic_id: int) -> List[Material]:
    get_topic_or_404(db, topic_id)
    return (
        db.query(Material)
        .filter(Material.topic_id == topic_id)
        .order_by(Material.sequence.asc())
        .all()
    )


def get_material_or_404(db: Session, material_id: int) -> Material:
    material = db.get(Material, material_id)
    if material is None:
        raise NotFoundError("Material not found")
    return material


def update_material(
    db: Session,
    *,
    material: Material,
    actor: User,
    obj_in: MaterialUpdate,
) -> Material:
    ensure_manager(actor, "Only Managers can update materials")
    ensure_course_owner(
        material.topic.course, actor, "You can only update materials in courses you created"
    )

    update_data = obj_in.model_dump(exclude_unset=True)
    for field in ("type", "title", "sequence", "content"):
        if update_data.get(field, True) is None:
            update_data.pop(field)

    if "content" in update_data:
        update_data["content"] = obj_in.content.model_dump(exclude_none=True)
    if "type" in update_data or "content" in update_data:
        validate_content(
            update_data.get("type", material.type),
            update_data.get("content", material.content or {}),
        )

    new_sequence = update_data.get("sequence")
    if new_sequence is not None and new_sequence != material.sequence:
        _ensure_free_sequence(db, material.topic_id, new_sequence)

    for field, value in update_data.items():
        setattr(material, field, value)
    db.add(material)
    db.commit()
    db.refresh(material)
    return material


def delete_material(db: Session, *, material: Material, actor: User) -> None:
    ensure_manager(actor, "Only Managers can delete materials")
    ensure_course_owner(
        material.topic.course, actor, "You can only delete materials in courses you created"
    )
    db.delete(material)
    db.commit()


def reorder_materials(
    db: Session,
    *,
    topic_id: int,
    actor: User,
    obj_in: MaterialReorderRequest,
) -> List[Material]:
    ensure_manager(actor, "Only Managers can reorder materials")
    topic = get_topic_or_404(db, topic_id)
    ensure_course_owner(
        topic.course, actor, "You can only reorder materials in courses you created"
    )

    ordering.apply_reorder(
        db,
        model=Material,
        parent_column=Material.topic_id,
        parent_id=topic.id,
        items=obj_in.materials,
        mismatch_message="One or more materials do not belong to this topic",
    )
    return list_materials(db, topic_id=topic.id)
