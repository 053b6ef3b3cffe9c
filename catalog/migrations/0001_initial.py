import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('partners', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Part',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('code', models.CharField(help_text="Store's own part code, unique per store", max_length=50)),
                ('name', models.CharField(max_length=200)),
                ('description', models.TextField(blank=True)),
                ('brand', models.CharField(max_length=100)),
                ('vehicle_model', models.CharField(blank=True, help_text='Compatible vehicles, e.g. Corolla 2015-2020', max_length=100)),
                ('category', models.CharField(choices=[('Brakes', 'Brakes'), ('Engine', 'Engine'), ('Suspension', 'Suspension'), ('Transmission', 'Transmission'), ('Electrical', 'Electrical System'), ('Bodywork', 'Bodywork'), ('Tires', 'Tires'), ('Lubricants', 'Oils/Lubricants'), ('Paint', 'Paint'), ('Other', 'Other')], max_length=30)),
                ('base_price', models.DecimalField(decimal_places=2, max_digits=12)),
                ('stock', models.PositiveIntegerField(default=0)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('store', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='parts', to='partners.store')),
            ],
            options={
                'ordering': ['-created_at', '-id'],
                'indexes': [models.Index(fields=['category', 'brand'], name='part_category_brand_idx')],
                'constraints': [
                    models.UniqueConstraint(fields=('store', 'code'), name='unique_part_code_per_store'),
                    models.CheckConstraint(condition=models.Q(('base_price__gte', 0)), name='part_base_price_non_negative'),
                ],
            },
        ),
    ]
