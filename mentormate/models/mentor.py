# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the MentorMate project.
# Licensed under the MIT License - see the LICENSE file for details.


import enum
import uuid
from sqlalchemy import Column, String, Text, DateTime, Boolean, Enum, JSON, ForeignKey
from mentormate.models.database import Base
from mentormate.utils.time_utils import utcnow


class MentorCategory(enum.Enum):
    fitness = "fitness"
    wellness = "wellness"
    study = "study"
    career = "career"
    custom = "custom"


class Mentor(Base):
    __tablename__ = "mentors"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    # Stable identifier for built-in personas; custom mentors have none
    slug = Column(String(64), unique=True, nullable=True, index=True)
    name = Column(String, nullable=False)
    category = Column(Enum(MentorCategory), nullable=False)
    tone = Column(String, default="supportive")
    description = Column(Text, default="")

    personality = Column(Text, nullable=True)
    speaking_style = Column(Text, nullable=True)
    motivation_approach = Column(Text, nullable=True)
    prompt_template = Column(Text, nullable=True)
    response_style = Column(JSON, nullable=True)  # tone / emoji_use / encouragement_level / challenge_level
    expertise = Column(JSON, nullable=True)

    is_custom = Column(Boolean, default=False, nullable=False)
    created_by = Column(String(36), ForeignKey("user_profiles.id", use_alter=True, name="fk_mentor_created_by"), nullable=True)
    tavus_avatar_id = Column(String, nullable=True)
    created_at = Column(DateTime, default=utcnow)

    def __repr__(self):
        return f"<Mentor slug={self.slug} name={self.name} category={self.category.value}>"
