from datetime import date, datetime

from sqlalchemy import update
from sqlalchemy.orm import Session

from ramplo.db.models.progress import UserProgress, DailyConnections, DailyLoanActions

def get_user_progress(db: Session, user_id: int) -> UserProgress | None:
    return db.query(UserProgress).filter(UserProgress.user_id == user_id).first()

def update_user_progress(db: Session, user_id: int, **fields) -> None:
    """Plain field assignment (cursor, cached ramp run, ...). Does not commit."""
    db.execute(
        update(UserProgress)
        .where(UserProgress.user_id == user_id)
        .values(updated_at=datetime.utcnow(), **fields)
        .execution_options(synchronize_session=False)
    )

def increment_user_progress(db: Session, user_id: int, touch: bool = True, **deltas: int) -> None:
    """
    Adds ``deltas`` to counter columns with a single UPDATE
    (``col = col + n``) so concurrent writers never lose increments.
    Does not commit.
    """
    values = {
        name: getattr(UserProgress, name) + amount
        for name, amount in deltas.items()
        if amount
    }
    if touch:
        values["last_activity_date"] = datetime.utcnow()
    if not values:
        return
    values["updated_at"] = datetime.utcnow()
    db.execute(
        update(UserProgress)
        .where(UserProgress.user_id == user_id)
        .values(**values)
        .execution_options(synchronize_session=False)
    )

def _get_or_create_daily(db: Session, model, user_id: int, on_date: date):
    # The (user_id, date) unique constraint rejects a racing duplicate insert at flush time
    row = db.query(model).filter(model.user_id == user_id, model.date == on_date).first()
    if row is None:
        row = model(user_id=user_id, date=on_date)
        db.add(row)
        db.flush()
    return row

def get_daily_connections(db: Session, user_id: int, on_date: date) -> DailyConnections | None:
    return db.query(DailyConnections).filter(
        DailyConnections.user_id == user_id,
        DailyConnections.date == on_date
    ).first()

def get_or_create_daily_connections(db: Session, user_id: int, on_date: date) -> DailyConnections:
    return _get_or_create_daily(db, DailyConnections, user_id, on_date)

def get_connections_between(db: Session, user_id: int, start: date, end: date) -> list[DailyConnections]:
    return db.query(DailyConnections).filter(
        DailyConnections.user_id == user_id,
        DailyConnections.date >= start,
        DailyConnections.date <= end
    ).all()

def get_daily_loan_actions(db: Session, user_id: int, on_date: date) -> DailyLoanActions | None:
    return db.query(DailyLoanActions).filter(
        DailyLoanActions.user_id == user_id,
        DailyLoanActions.date == on_date
    ).first()

def get_or_create_daily_loan_actions(db: Session, user_id: int, on_date: date) -> DailyLoanActions:
    return _get_or_create_daily(db, DailyLoanActions, user_id, on_date)

def add_to_daily(db: Session, model, row_id: int, **deltas: int) -> None:
    """``col = col + n`` on one daily row. Does not commit."""
    values = {name: getattr(model, name) + amount for name, amount in deltas.items() if amount}
    if not values:
        return
    values["updated_at"] = datetime.utcnow()
    db.execute(
        update(model)
        .where(model.id == row_id)
        .values(**values)
        .execution_options(synchronize_session=False)
    )
