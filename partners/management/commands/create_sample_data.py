"""
Management command to create sample data for the parts marketplace
"""
from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction

from authentication.models import UserRole
from catalog.models import Part
from catalog.services import CatalogService
from orders.models import Order
from partners.models import Store, Workshop
from quotations.enums import PartCategory
from quotations.models import Offer, QuotationRequest
from quotations.services import RequestLifecycleService

User = get_user_model()

WORKSHOPS = [
    {
        'email': 'workshop1@example.com', 'name': 'Taller Norte', 'tax_id': 'WS-0001',
        'phone_number': '+56911110001', 'address': 'Av. Principal 123', 'city': 'Santiago', 'region': 'Metropolitana',
    },
    {
        'email': 'workshop2@example.com', 'name': 'Taller Costa', 'tax_id': 'WS-0002',
        'phone_number': '+56911110002', 'address': 'Calle Puerto 45', 'city': 'Valparaiso', 'region': 'Valparaiso',
    },
]

STORES = [
    {
        'email': 'store1@example.com', 'name': 'Repuestos Centro', 'tax_id': 'ST-0001',
        'phone_number': '+56922220001', 'address': 'Calle Comercio 10', 'city': 'Santiago', 'region': 'Metropolitana',
        'coverage_regions': ['Metropolitana', 'Valparaiso'],
        'categories': [PartCategory.BRAKES, PartCategory.SUSPENSION, PartCategory.TIRES],
    },
    {
        'email': 'store2@example.com', 'name': 'Motor Parts', 'tax_id': 'ST-0002',
        'phone_number': '+56922220002', 'address': 'Av. Industrial 900', 'city': 'Santiago', 'region': 'Metropolitana',
        'coverage_regions': ['Metropolitana'],
        'categories': [PartCategory.ENGINE, PartCategory.LUBRICANTS, PartCategory.ELECTRICAL],
    },
    {
        'email': 'store3@example.com', 'name': 'Todo Auto', 'tax_id': 'ST-0003',
        'phone_number': '+56922220003', 'address': 'Ruta 68 km 5', 'city': 'Valparaiso', 'region': 'Valparaiso',
        'coverage_regions': ['Valparaiso'],
        'categories': [],
    },
]

PARTS = {
    'store1@example.com': [
        {'code': 'BRK-001', 'name': 'Front brake pads', 'brand': 'Brembo', 'vehicle_model': 'Corolla 2015-2020',
         'category': PartCategory.BRAKES, 'base_price': '45000.00', 'stock': 25},
        {'code': 'SUS-014', 'name': 'Rear shock absorber', 'brand': 'Monroe',
         'category': PartCategory.SUSPENSION, 'base_price': '62000.00', 'stock': 4},
    ],
    'store2@example.com': [
        {'code': 'OIL-530', 'name': 'Engine oil 5W-30 4L', 'brand': 'Castrol',
         'category': PartCategory.LUBRICANTS, 'base_price': '34990.00', 'stock': 0},
    ],
}

REQUESTS = [
    {
        'workshop': 'workshop1@example.com',
        'title': 'Front brake service',
        'category': PartCategory.BRAKES,
        'vehicle_make': 'Toyota', 'vehicle_model': 'Corolla', 'vehicle_year': 2018, 'vehicle_plate': 'KXLT-21',
        'items': [
            {'name': 'Front brake pads', 'brand': 'Bosch', 'quantity': 1},
            {'name': 'Front brake disc', 'quantity': 2},
        ],
    },
    {
        'workshop': 'workshop1@example.com',
        'title': 'Oil change kit',
        'category': PartCategory.LUBRICANTS,
        'vehicle_make': 'Hyundai', 'vehicle_model': 'Accent', 'vehicle_year': 2020,
        'items': [
            {'name': 'Engine oil 5W-30 4L', 'quantity': 1},
            {'code': 'OF-220', 'name': 'Oil filter', 'quantity': 1},
        ],
    },
    {
        'workshop': 'workshop2@example.com',
        'title': 'Rear shock absorbers',
        'category': PartCategory.SUSPENSION,
        'vehicle_make': 'Chevrolet', 'vehicle_model': 'Sail', 'vehicle_year': 2016,
        'items': [
            {'name': 'Rear shock absorber', 'brand': 'Monroe', 'quantity': 2},
        ],
    },
]


class Command(BaseCommand):
    help = 'Create sample data for the parts marketplace'

    def add_arguments(self, parser):
        parser.add_argument(
            '--clear',
            action='store_true',
            dest='clear',
            help='Clear existing data before creating new sample data',
        )

    @transaction.atomic
    def handle(self, *args, **options):
        if options['clear']:
            self.clear_existing_data()

        self.stdout.write('Creating sample data...')

        self.create_admin()
        workshops = self.create_workshops()
        stores = self.create_stores()
        self.create_parts(stores)
        self.create_requests(workshops)

        self.stdout.write(self.style.SUCCESS('Sample data created successfully!'))
        self.print_test_endpoints()

    def clear_existing_data(self):
        self.stdout.write('Clearing existing sample data...')

        # Clear in reverse order of dependencies
        Order.objects.all().delete()
        Offer.objects.all().delete()
        QuotationRequest.objects.all().delete()
        Part.objects.all().delete()
        Store.objects.all().delete()
        Workshop.objects.all().delete()

        # Keep admin users
        User.objects.filter(role__in=[UserRole.WORKSHOP, UserRole.STORE]).delete()

        self.stdout.write('Existing data cleared!')

    def _get_or_create_user(self, email, role, name, phone_number, password):
        user, created = User.objects.get_or_create(
            email=email,
            defaults={'name': name, 'role': role, 'phone_number': phone_number}
        )
        if created:
            user.set_password(password)
            user.save()
        return user, created

    def create_admin(self):
        admin_user, created = User.objects.get_or_create(
            email='admin@partsmarket.com',
            defaults={
                'name': 'Admin User',
                'role': UserRole.ADMIN,
                'is_staff': True,
                'is_superuser': True,
            }
        )
        if created:
            admin_user.set_password('admin123')
            admin_user.save()
            self.stdout.write("Created admin user")

    def create_workshops(self):
        workshops = {}
        for data in WORKSHOPS:
            data = dict(data)
            email = data.pop('email')
            user, _ = self._get_or_create_user(email, UserRole.WORKSHOP, data['name'], data['phone_number'], 'workshop123')
            workshop, created = Workshop.objects.get_or_create(user=user, defaults=data)
            workshops[email] = workshop
            if created:
                self.stdout.write(f"Created workshop: {workshop.name}")
        return workshops

    def create_stores(self):
        stores = {}
        for data in STORES:
            data = dict(data)
            email = data.pop('email')
            user, _ = self._get_or_create_user(email, UserRole.STORE, data['name'], data['phone_number'], 'store123')
            store, created = Store.objects.get_or_create(user=user, defaults=data)
            stores[email] = store
            if created:
                self.stdout.write(f"Created store: {store.name}")
        return stores

    def create_parts(self, stores):
        for email, parts in PARTS.items():
            store = stores[email]
            for data in parts:
                if store.parts.filter(code=data['code']).exists():
                    continue
                part = CatalogService.create_part(store.pk, data)
                self.stdout.write(f"Created part: {part.code} {part.name} ({store.name})")

    def create_requests(self, workshops):
        for data in REQUESTS:
            data = dict(data)
            workshop = workshops[data.pop('workshop')]
            if workshop.quotation_requests.filter(title=data['title']).exists():
                continue
            quotation_request = RequestLifecycleService.create_request(workshop.pk, data)
            self.stdout.write(f"Created request: {quotation_request.title} ({quotation_request.category})")

    def print_test_endpoints(self):
        self.stdout.write('\n' + '=' * 60)
        self.stdout.write(self.style.SUCCESS('SAMPLE API ENDPOINTS FOR TESTING'))
        self.stdout.write('=' * 60)

        self.stdout.write('\n1. Login as workshop:')
        self.stdout.write('   POST /api/auth/login/')
        self.stdout.write('   Body: {"email": "workshop1@example.com", "password": "workshop123"}')

        self.stdout.write('\n2. Login as store:')
        self.stdout.write('   POST /api/auth/login/')
        self.stdout.write('   Body: {"email": "store1@example.com", "password": "store123"}')

        self.stdout.write('\n3. Store feed of matching requests:')
        self.stdout.write('   GET /api/quotations/requests/available/')

        self.stdout.write('\n4. Ranked offers for a request:')
        self.stdout.write('   GET /api/quotations/requests/<id>/ranking/')

        self.stdout.write('\n5. Search the parts catalog:')
        self.stdout.write('   GET /api/catalog/parts/?query=brake&in_stock=true')
