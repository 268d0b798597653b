import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database import Base, get_db
from main import app
from models.product import Category, Product
from models.users import User, UserRole
from utils.hashing import get_password_hash
from utils.session import memory_store

from helpers import ADMIN_PASSWORD, WORKER_PASSWORD, login


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture(autouse=True)
def override_db(session_factory):
    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    memory_store.clear()
    yield
    app.dependency_overrides.clear()
    memory_store.clear()


@pytest.fixture
def admin_user(db):
    user = User(
        name="Ana Admin",
        nickname="Ana",
        username="ana",
        password=get_password_hash(ADMIN_PASSWORD),
        role=UserRole.ADMINISTRADOR,
        is_first_login=False,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def worker_user(db):
    user = User(
        name="Bruno Worker",
        nickname="Bruno",
        username="bruno",
        password=get_password_hash(WORKER_PASSWORD),
        role=UserRole.ARMAZENISTA,
        is_first_login=False,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def client():
    # Lifespan is not started: tables come from the engine fixture
    return TestClient(app)


@pytest.fixture
def admin_client(admin_user):
    c = TestClient(app)
    assert login(c, admin_user.username, ADMIN_PASSWORD).status_code == 200
    return c


@pytest.fixture
def worker_client(worker_user):
    c = TestClient(app)
    assert login(c, worker_user.username, WORKER_PASSWORD).status_code == 200
    return c


@pytest.fixture
def make_product(db):
    def _make(code="P001", description="Cola branca 1L", quantity_bases=4, units_per_base=12,
              category=Category.ALTA_ROTACAO):
        product = Product(
            code=code,
            description=description,
            quantity_bases=quantity_bases,
            units_per_base=units_per_base,
            category=category,
        )
        db.add(product)
        db.commit()
        db.refresh(product)
        return product
    return _make
