from .extensions import db
from .models import BusinessSettings, RoomType, Room
from .numbering import ensure_counters
from . import create_app

def run():
    app = create_app()
    with app.app_context():
        db.create_all()
        ensure_counters()
        if not BusinessSettings.query.first():
            db.session.add(BusinessSettings(property_name=app.config['APP_NAME'],
                                            gst_percentage=app.config['DEFAULT_GST_PERCENT']))
        if not RoomType.query.first():
            standard = RoomType(name='Standard', default_rate=1000)
            deluxe = RoomType(name='Deluxe', default_rate=2000)
            db.session.add_all([standard, deluxe])
            db.session.add_all([Room(number='101', room_type=standard),
                                Room(number='102', room_type=standard),
                                Room(number='201', room_type=deluxe)])
        db.session.commit()

if __name__ == '__main__':
    run()
