from sqlalchemy import (
    Column,
    Integer,
    String,
    Boolean,
    TIMESTAMP,
    Text,
)
from sqlalchemy.sql import func

from app.core.database import Base


# =========================
# Operator accounts
# =========================
class User(Base):
    __tablename__ = "users_table"

    id = Column(Integer, primary_key=True, autoincrement=True)

    email = Column(String, nullable=False, unique=True, index=True)
    password = Column(String, nullable=False)
    role = Column(String, nullable=False, server_default="user")

    created_at = Column(
        TIMESTAMP(timezone=True),
        nullable=False,
        server_default=func.now(),
    )


# =========================
# Statistics tables (read-only for the chat engine)
# =========================
class LocationColumns:
    """Year and location identifiers shared by every statistics table."""

    response_year = Column("Response_Year", Integer, index=True)
    state = Column("State", String(100), index=True)
    state_pcode = Column("State_Pcode", String(20))
    lga = Column("LGA", String(100), index=True)
    lga_pcode = Column("LGA_Pcode", String(20))


class DemographicColumns:
    """
    People counts by displacement status x gender x age band.
    Column names follow the published dataset (IDP_Girls, Returnee_Women, ...).
    """

    idp_girls = Column("IDP_Girls", Integer)
    idp_boys = Column("IDP_Boys", Integer)
    idp_women = Column("IDP_Women", Integer)
    idp_men = Column("IDP_Men", Integer)
    idp_elderly_women = Column("IDP_Elderly_Women", Integer)
    idp_elderly_men = Column("IDP_Elderly_Men", Integer)

    returnee_girls = Column("Returnee_Girls", Integer)
    returnee_boys = Column("Returnee_Boys", Integer)
    returnee_women = Column("Returnee_Women", Integer)
    returnee_men = Column("Returnee_Men", Integer)
    returnee_elderly_women = Column("Returnee_Elderly_Women", Integer)
    returnee_elderly_men = Column("Returnee_Elderly_Men", Integer)

    host_community_girls = Column("Host_Community_Girls", Integer)
    host_community_boys = Column("Host_Community_Boys", Integer)
    host_community_women = Column("Host_Community_Women", Integer)
    host_community_men = Column("Host_Community_Men", Integer)
    host_community_elderly_women = Column("Host_Community_Elderly_Women", Integer)
    host_community_elderly_men = Column("Host_Community_Elderly_Men", Integer)


class BaselineData(LocationColumns, DemographicColumns, Base):
    """General population figures per location and response year."""

    __tablename__ = "baselinedata"

    id = Column(Integer, primary_key=True, autoincrement=True)


class NeedsData(LocationColumns, DemographicColumns, Base):
    """
    People in need of assistance.
    Same demographic shape as the baseline, split by humanitarian sector.
    """

    __tablename__ = "needsdata"

    id = Column(Integer, primary_key=True, autoincrement=True)
    sector = Column("Sector", String(100), index=True)


class SeverityData(LocationColumns, Base):
    __tablename__ = "severitydata"

    id = Column(Integer, primary_key=True, autoincrement=True)
    sector = Column("Sector", String(100), index=True)

    idp_severity = Column("IDP_Severity", Integer)
    returnee_severity = Column("Returnee_Severity", Integer)
    host_community_severity = Column("Host_Community_Severity", Integer)
    final_severity = Column("Final_Severity", Integer)  # composite score


# =========================
# FAQ
# =========================
class Faq(Base):
    __tablename__ = "faq"

    id = Column(Integer, primary_key=True, autoincrement=True)

    question = Column(Text, nullable=False)
    answer = Column(Text, nullable=False)

    created_at = Column(
        TIMESTAMP(timezone=True),
        nullable=False,
        server_default=func.now(),
    )


# =========================
# Conversation log (APPEND-ONLY)
# =========================
class ConversationLog(Base):
    """
    One row per answered chat message.
    Rows are only ever inserted, never updated or read back by the chat engine.
    """

    __tablename__ = "conversation_log"

    id = Column(Integer, primary_key=True, autoincrement=True)

    message = Column(Text, nullable=False)
    response = Column(Text, nullable=False)

    is_related = Column(Boolean, nullable=False, default=False)
    is_in_need = Column(Boolean, nullable=False, default=False)
    is_detailed = Column(Boolean, nullable=False, default=False)

    created_at = Column(
        TIMESTAMP(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
