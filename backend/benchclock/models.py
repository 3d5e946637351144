from benchclock import db


class TimerRecord(db.Model):
    __tablename__ = 'timer'
    id = db.Column(db.String(32), primary_key=True)
    name = db.Column(db.String(64), nullable=False)
    elapsed = db.Column(db.Float, nullable=False, default=0.0)
    running = db.Column(db.Boolean, nullable=False, default=False)
    position = db.Column(db.Integer, nullable=False, default=0, index=True)  # creation order
