# tests/conftest.py
import os
import tempfile
from datetime import datetime

import pytest

# Keep the app's own engine off disk; tests use their own DB below
os.environ.setdefault("DATABASE_URL", "sqlite://")

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from asset_rules.main import app
from asset_rules.db import Base, get_db
from asset_rules.models import (
    ApprovalRequest,
    ApprovalRequestStage,
    ApprovalStageTemplate,
    ApprovalTemplate,
    Asset,
    AssetYearlyCycle,
)


# --- Temporary SQLite DB file for the whole test session ---
@pytest.fixture(scope="session")
def tmp_db_url():
    fd, path = tempfile.mkstemp(suffix=".db")
    os.close(fd)
    url = f"sqlite:///{path}"
    yield url
    try:
        os.remove(path)
    except OSError:
        pass


@pytest.fixture(scope="session")
def engine(tmp_db_url):
    eng = create_engine(tmp_db_url, connect_args={"check_same_thread": False}, future=True)
    Base.metadata.create_all(bind=eng)
    return eng


def _clear_all(db):
    # child → parent order
    for table in reversed(Base.metadata.sorted_tables):
        db.execute(table.delete())
    db.commit()


@pytest.fixture(scope="function")
def db_session(engine):
    TestingSession = sessionmaker(bind=engine, autocommit=False, autoflush=False, future=True)
    db = TestingSession()
    _clear_all(db)
    try:
        yield db
    finally:
        db.rollback()
        db.close()


# --- Override FastAPI's DB dependency to use our test session ---
@pytest.fixture(autouse=True)
def override_get_db(db_session):
    def _get_db():
        try:
            yield db_session
        finally:
            pass
    app.dependency_overrides[get_db] = _get_db
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def seed_sample(db_session):
    """
    A small register:
      - A-WELL:  well, not abandoned, one earlier cycle
      - A-FLOW:  pipeline + flowline service, flowline id already set
      - A-BULK:  pipeline + bulkline service (option value 0)
      - A-RFA:   ready for abandonment
      - A-NEW:   not abandoned, no cycles yet
      - A-ABND:  abandoned
      - A-NONE:  no readiness status
      - template T-1 with two stages; request R-1 with one stale stage
    """
    assets = [
        Asset(asset_id="A-WELL", unique_identifier="0001", asset_type=1,
              readiness_status=3, well_code="WELL0001", asset_code="WELL0001", name="WELL0001"),
        Asset(asset_id="A-FLOW", unique_identifier="0002", asset_type=2, service_type=1,
              readiness_status=3, flowline_id="ADIBW002LFLN"),
        Asset(asset_id="A-BULK", unique_identifier="0003", asset_type=2, service_type=0,
              readiness_status=3),
        Asset(asset_id="A-RFA", unique_identifier="0004", asset_type=3, readiness_status=1),
        Asset(asset_id="A-NEW", unique_identifier="0005", asset_type=4, readiness_status=3),
        Asset(asset_id="A-ABND", unique_identifier="0006", asset_type=3, readiness_status=2),
        Asset(asset_id="A-NONE", unique_identifier="0007", asset_type=4),
    ]
    db_session.add_all(assets)
    db_session.commit()

    db_session.add(AssetYearlyCycle(
        cycle_id="C-2024", asset_id="A-WELL", p50_edm_cost=1000000, p50_mod=500000,
        decommissioning_year=2030, created_on=datetime(2024, 1, 1),
    ))
    db_session.commit()

    db_session.add(ApprovalTemplate(template_id="T-1", name="Decommissioning sign-off"))
    db_session.add_all([
        ApprovalStageTemplate(stage_template_id="ST-1", template_id="T-1",
                              name="Engineering review", stage_order=1, approver="u-eng"),
        ApprovalStageTemplate(stage_template_id="ST-2", template_id="T-1",
                              name="  ", stage_order=None, approver=None),
    ])
    db_session.add(ApprovalTemplate(template_id="T-EMPTY", name="No stages"))
    db_session.add(ApprovalRequest(request_id="R-1", name="Abandon A-RFA"))
    db_session.commit()

    db_session.add(ApprovalRequestStage(stage_id="OLD-1", request_id="R-1", name="Stale", stage_order=9))
    db_session.commit()
