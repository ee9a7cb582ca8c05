from typing import Optional

from sqlmodel import Session

from pitchthesis.db.models import Thesis


def create_thesis(db: Session, *, text: str, thesis: str, user_id: Optional[int] = None,
                  provenance: Optional[str] = None) -> Thesis:
    row = Thesis(user_id=user_id, text=text, thesis=thesis, provenance=provenance)
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def get_thesis(db: Session, thesis_id: int) -> Optional[Thesis]:
    return db.get(Thesis, thesis_id)
