from badge_request import db


class BadgeRequest(db.Model):
    """One employee badge request, saved as soon as it is added to the form."""

    __tablename__ = "badge_requests"

    id = db.Column(db.Integer, primary_key=True)
    requester_name = db.Column(db.String(200))
    company = db.Column(db.String(100), nullable=False, index=True)
    employee_name = db.Column(db.String(200), nullable=False)

    # Exactly one of these is filled in
    ldap = db.Column(db.String(20), default="")
    ain = db.Column(db.String(9), default="")

    created_at = db.Column(db.DateTime, server_default=db.func.now())

    @property
    def id_type(self):
        return "LDAP" if self.ldap else "Time Clock"

    @property
    def id_value(self):
        return self.ldap or self.ain

    def __repr__(self):
        return f"<BadgeRequest {self.id} - {self.employee_name} ({self.company})>"
