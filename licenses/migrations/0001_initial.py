from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="License",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("customer_name", models.CharField(db_index=True, max_length=255)),
                ("system_id", models.CharField(max_length=100, unique=True)),
                ("site_name", models.CharField(max_length=255)),
                ("device_count", models.PositiveIntegerField()),
                ("validity", models.PositiveIntegerField(help_text="Validity in months from activation")),
                ("email", models.EmailField(max_length=254)),
                ("password", models.CharField(help_text="One-time activation password", max_length=128)),
                ("generated_date", models.DateField()),
                ("activated_date", models.DateField(blank=True, null=True)),
                ("state", models.PositiveSmallIntegerField(choices=[(0, "Inactive"), (1, "Active")], db_index=True, default=0)),
                ("description", models.TextField(blank=True, default="")),
                ("file_url", models.CharField(blank=True, default="", max_length=500)),
                ("fe_mac", models.CharField(blank=True, default="", max_length=64)),
                ("be_mac", models.CharField(blank=True, default="", max_length=64)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "db_table": "licenses",
                "ordering": ["-created_at"],
            },
        ),
        migrations.AddConstraint(
            model_name="license",
            constraint=models.UniqueConstraint(fields=("customer_name", "system_id"), name="unique_customer_system_id"),
        ),
        migrations.CreateModel(
            name="NotificationDeadLetter",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("customer_name", models.CharField(max_length=255)),
                ("system_id", models.CharField(db_index=True, max_length=100)),
                ("recipient", models.EmailField(max_length=254)),
                ("reason", models.CharField(choices=[("created", "Created"), ("updated", "Updated")], max_length=20)),
                ("error", models.TextField()),
                ("attempts", models.PositiveSmallIntegerField()),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "db_table": "notification_dead_letters",
                "ordering": ["-created_at"],
            },
        ),
    ]
