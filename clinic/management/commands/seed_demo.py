# clinic/management/commands/seed_demo.py
from datetime import timedelta

from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from clinic.models import Patient, PatientRecord, Profile, User

DEMO_EMAIL = "demo@psicare.local"
DEMO_PASSWORD = "psicare123"

SAMPLE_PATIENTS = [
    ("Ana Souza", "ana@example.com", "11988887777", Patient.STATUS_ACTIVE),
    ("Bruno Lima", "bruno@example.com", "11977776666", Patient.STATUS_ACTIVE),
    ("Carla Dias", "", "11966665555", Patient.STATUS_INACTIVE),
    ("Diego Alves", "diego@example.com", "", Patient.STATUS_DISCHARGED),
]


class Command(BaseCommand):
    help = "Ensure the demo psychologist exists (idempotent); --with-data adds sample patients and sessions."

    def add_arguments(self, parser):
        parser.add_argument("--email", default=DEMO_EMAIL)
        parser.add_argument("--password", default=DEMO_PASSWORD)
        parser.add_argument("--with-data", action="store_true", help="create sample patients and session records")

    @transaction.atomic
    def handle(self, *args, **opts):
        email = opts["email"].strip().lower()
        user, created = User.objects.get_or_create(
            email=email,
            defaults={"username": email, "is_active": True},
        )
        # always reset the password and activation state
        user.set_password(opts["password"])
        user.is_active = True
        user.save()
        Profile.objects.update_or_create(user=user, defaults={"full_name": "Dr(a). Demo", "crp": "06/000000"})
        self.stdout.write(self.style.SUCCESS(f"{'created' if created else 'ok'}: {email}"))

        if not opts["with_data"]:
            return
        today = timezone.localdate()
        for idx, (name, mail, phone, status) in enumerate(SAMPLE_PATIENTS):
            patient, p_created = Patient.objects.get_or_create(
                psychologist=user,
                full_name=name,
                defaults={"email": mail, "phone": phone, "status": status},
            )
            if p_created:
                for week in range(idx + 1):
                    PatientRecord.objects.create(
                        patient=patient,
                        psychologist=user,
                        session_date=today - timedelta(weeks=week),
                        mood_state="Estável",
                        main_complaint="Ansiedade no trabalho",
                        session_notes=f"Sessão {idx + 1 - week} de acompanhamento.",
                    )
            self.stdout.write(f"  patient: {name} ({'new' if p_created else 'exists'})")
        self.stdout.write(self.style.SUCCESS("Demo data ensured."))
