import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


valida_codigo = django.core.validators.RegexValidator('^[A-Z0-9\\-_.]{2,50}$', 'Código inválido (usa A-Z, 0-9, -, _, .)')


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('products', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Bodega',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('codigo', models.CharField(max_length=50, unique=True, validators=[valida_codigo], verbose_name='Código')),
                ('nombre', models.CharField(max_length=200, verbose_name='Nombre')),
                ('direccion', models.CharField(max_length=255, verbose_name='Dirección')),
                ('capacidad', models.PositiveIntegerField(blank=True, null=True,
                                                          validators=[django.core.validators.MinValueValidator(1)],
                                                          verbose_name='Capacidad')),
                ('responsable_nombre', models.CharField(max_length=100, verbose_name='Responsable')),
                ('responsable_email', models.EmailField(max_length=191, verbose_name='Email del responsable')),
                ('responsable_celular', models.CharField(max_length=20, verbose_name='Celular del responsable')),
                ('activo', models.BooleanField(default=True, verbose_name='Activo')),
                ('creado_en', models.DateTimeField(auto_now_add=True, verbose_name='Creado en')),
                ('actualizado_en', models.DateTimeField(auto_now=True, verbose_name='Actualizado en')),
            ],
            options={
                'verbose_name': 'Bodega',
                'verbose_name_plural': 'Bodegas',
                'ordering': ['nombre'],
            },
        ),
        migrations.CreateModel(
            name='Movimiento',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('tipo', models.CharField(choices=[('entrada', 'Entrada'), ('salida', 'Salida')], max_length=10)),
                ('origen', models.CharField(choices=[('movimiento', 'Movimiento'), ('ajuste', 'Ajuste de stock'),
                                                     ('inicial', 'Stock inicial')],
                                            default='movimiento', max_length=12)),
                ('fecha', models.DateTimeField(auto_now_add=True)),
                ('cantidad', models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)])),
                ('observaciones', models.TextField(blank=True)),
                ('bodega', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='movimientos',
                                             to='transactional.bodega')),
                ('producto', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='movimientos',
                                               to='products.producto')),
                ('registrado_por', models.ForeignKey(blank=True, null=True,
                                                     on_delete=django.db.models.deletion.SET_NULL,
                                                     related_name='movimientos', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Movimiento',
                'verbose_name_plural': 'Movimientos',
                'ordering': ['-fecha', '-id'],
                'indexes': [
                    models.Index(fields=['producto', 'bodega'], name='mov_producto_bodega_idx'),
                    models.Index(fields=['fecha'], name='mov_fecha_idx'),
                ],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(cantidad__gt=0), name='mov_cantidad_gt_0'),
                ],
            },
        ),
    ]
