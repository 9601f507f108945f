from wordle_score import db
import time


class KeyValueEntry(db.Model):
    """Durable local key/value store backing the score record and preferences."""
    __tablename__ = 'kv_entry'
    key = db.Column(db.String(128), primary_key=True)
    value = db.Column(db.Text, nullable=False)
    updated_at = db.Column(db.Float, nullable=False, default=time.time)

    def to_dict(self):
        return {
            'key': self.key,
            'value': self.value,
            'updated_at': self.updated_at,
        }
