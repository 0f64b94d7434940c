# backoffice/crud/home_page.py
from sqlalchemy.orm import Session
from typing import Any, Dict, Optional
from backoffice.models.settings import HomePageContent

def get_section(db: Session, section_key: str) -> Optional[HomePageContent]:
    return db.query(HomePageContent).filter(HomePageContent.section_key == section_key).first()

def get_all_sections(db: Session) -> Dict[str, Dict[str, Any]]:
    """Все секции главной страницы: section_key -> content"""
    return {row.section_key: row.content for row in db.query(HomePageContent).all()}

def upsert_section(db: Session, section_key: str, content: Dict[str, Any], commit: bool = True) -> HomePageContent:
    section = get_section(db, section_key)
    if section:
        section.content = content
    else:
        section = HomePageContent(section_key=section_key, content=content)
        db.add(section)

    if commit:
        db.commit()
        db.refresh(section)
    return section

def upsert_sections(db: Session, sections: Dict[str, Dict[str, Any]]) -> None:
    for section_key, content in sections.items():
        upsert_section(db, section_key, content, commit=False)
        db.flush()
    db.commit()
