from django.db import migrations

SCENARIOS = [
    (1, 'Medical Emergency - Cardiac', 'Cardiac emergency scenario',
     'Patient presenting with chest pain and cardiac symptoms'),
    (2, 'Trauma - Multi-System', 'Multi-system trauma scenario',
     'Trauma patient with multiple injuries requiring rapid assessment'),
    (3, 'Medical Emergency - Respiratory', 'Respiratory emergency scenario',
     'Patient with acute respiratory distress'),
    (4, 'Trauma - Isolated', 'Isolated trauma scenario',
     'Single-system trauma requiring focused assessment'),
    (5, 'Medical Emergency - Neurological', 'Neurological emergency scenario',
     'Patient presenting with altered mental status or stroke symptoms'),
    (6, 'Pediatric Emergency', 'Pediatric patient scenario',
     'Pediatric patient requiring age-appropriate assessment and treatment'),
]


def seed(apps, schema_editor):
    SummativeScenario = apps.get_model('clinical', 'SummativeScenario')
    for number, title, description, presentation in SCENARIOS:
        SummativeScenario.objects.get_or_create(
            scenario_number=number,
            defaults={'title': title, 'description': description, 'patient_presentation': presentation},
        )


def unseed(apps, schema_editor):
    SummativeScenario = apps.get_model('clinical', 'SummativeScenario')
    SummativeScenario.objects.filter(scenario_number__in=[s[0] for s in SCENARIOS], evaluations__isnull=True).delete()


class Migration(migrations.Migration):

    dependencies = [
        ('clinical', '0001_initial'),
    ]

    operations = [
        migrations.RunPython(seed, unseed),
    ]
