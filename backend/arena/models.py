from arena import db
import string
import random
import time

DRAW = 'draw'


def generate_user_id(length=8):
    """Generate a unique public user id such as ARNG-7QK2M9XD."""
    while True:
        user_id = 'ARNG-' + ''.join(random.choices(string.ascii_uppercase + string.digits, k=length))
        if not User.query.filter_by(user_id=user_id).first():
            return user_id


class User(db.Model):
    __tablename__ = 'users'
    user_id = db.Column(db.String(32), primary_key=True)
    username = db.Column(db.String(64), nullable=False, default='player')
    wins = db.Column(db.Integer, nullable=False, default=0)
    losses = db.Column(db.Integer, nullable=False, default=0)
    rating = db.Column(db.Integer, nullable=False, default=1000, index=True)
    created_at = db.Column(db.Integer, nullable=False, default=lambda: int(time.time()))

    def to_dict(self):
        return {
            'user_id': self.user_id,
            'username': self.username,
            'wins': self.wins,
            'losses': self.losses,
            'rating': self.rating,
        }


class Match(db.Model):
    __tablename__ = 'matches'
    __table_args__ = (
        db.Index('idx_matches_players', 'player1_id', 'player2_id'),
    )
    match_id = db.Column(db.String(64), primary_key=True)
    player1_id = db.Column(db.String(32), db.ForeignKey('users.user_id'), nullable=False)
    player2_id = db.Column(db.String(32), db.ForeignKey('users.user_id'), nullable=False)
    player1_score = db.Column(db.Integer, nullable=False, default=0)
    player2_score = db.Column(db.Integer, nullable=False, default=0)
    # participant id or 'draw', so no foreign key
    winner_id = db.Column(db.String(32), nullable=True)
    # epoch milliseconds
    start_time = db.Column(db.BigInteger, nullable=False)
    end_time = db.Column(db.BigInteger, nullable=True)
    state = db.Column(db.String(16), nullable=False, default='active', index=True)  # active, finished

    def to_dict(self):
        return {
            'match_id': self.match_id,
            'player1_id': self.player1_id,
            'player2_id': self.player2_id,
            'player1_score': self.player1_score,
            'player2_score': self.player2_score,
            'winner': self.winner_id,
            'start_time': self.start_time,
            'end_time': self.end_time,
            'state': self.state,
        }
