"""
Tests for the package forwarding API.
"""

from rest_framework import status
from rest_framework.test import APITestCase

from ..models import Notification, PackageStatus, ShipmentStatus
from ..services import ShipmentService
from .factories import make_customer, make_staff, intake, advance_to_arrived


class PackageApiTest(APITestCase):
    """Test package endpoints."""

    def setUp(self):
        self.customer = make_customer('alice', 'VC-001')
        self.other = make_customer('bob', 'VC-002')
        self.staff = make_staff()
        self.admin = make_staff('boss', role='admin')

    def test_staff_intake(self):
        self.client.force_authenticate(self.staff)
        response = self.client.post('/api/packages/intake/', {
            'suite_number': 'vc-001',
            'description': 'Laptop',
            'weight': '3.20',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(response.data['success'])
        self.assertEqual(response.data['data']['status'], PackageStatus.RECEIVED)
        self.assertEqual(response.data['data']['suite_number'], 'VC-001')
        self.assertNotIn('delivery_auth_code', response.data['data'])

    def test_intake_unknown_suite(self):
        self.client.force_authenticate(self.staff)
        response = self.client.post('/api/packages/intake/', {'suite_number': 'VC-404'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['error']['code'], 'NOT_FOUND')

    def test_customer_cannot_intake(self):
        self.client.force_authenticate(self.customer)
        response = self.client.post('/api/packages/intake/', {'suite_number': 'VC-001'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_customer_pre_alert(self):
        self.client.force_authenticate(self.customer)
        response = self.client.post('/api/packages/pre_alert/', {'store_name': 'Amazon'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['data']['status'], PackageStatus.PENDING)

    def test_customer_sees_own_packages(self):
        intake(self.customer, self.staff)
        foreign = intake(self.other, self.staff)

        self.client.force_authenticate(self.customer)
        response = self.client.get('/api/packages/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['results']), 1)

        response = self.client.get(f'/api/packages/{foreign.id}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_invalid_transition(self):
        package = intake(self.customer, self.staff)

        self.client.force_authenticate(self.staff)
        response = self.client.post(
            f'/api/packages/{package.id}/update_status/', {'status': 'arrived'}, format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error']['code'], 'INVALID_TRANSITION')

    def test_correct_status_requires_admin(self):
        package = intake(self.customer, self.staff)
        payload = {'status': 'pending', 'reason': 'Wrong suite'}

        self.client.force_authenticate(self.staff)
        response = self.client.post(f'/api/packages/{package.id}/correct_status/', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(self.admin)
        response = self.client.post(f'/api/packages/{package.id}/correct_status/', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['status'], PackageStatus.PENDING)


class ShipmentApiTest(APITestCase):
    """Test shipment endpoints."""

    def setUp(self):
        self.customer = make_customer('alice', 'VC-001')
        self.staff = make_staff()
        self.package = intake(self.customer, self.staff)

    def test_create_and_conflict(self):
        self.client.force_authenticate(self.staff)
        payload = {'packages': [self.package.package_id], 'delivery_country': 'Ghana'}

        response = self.client.post('/api/shipments/', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['data']['package_ids'], [self.package.package_id])

        response = self.client.post('/api/shipments/', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data['error']['code'], 'ALREADY_LINKED')

    def test_delivered_cannot_be_set(self):
        shipment = ShipmentService.create_shipment(
            [self.package.id], {'delivery_country': 'Ghana'}, self.staff
        )

        self.client.force_authenticate(self.staff)
        response = self.client.post(
            f'/api/shipments/{shipment.id}/update_status/', {'status': 'delivered'}, format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error']['code'], 'DELIVERY_IS_DERIVED')

    def test_details(self):
        shipment = ShipmentService.create_shipment(
            [self.package.id], {'delivery_country': 'Ghana'}, self.staff
        )

        self.client.force_authenticate(self.customer)
        response = self.client.get(f'/api/shipments/{shipment.id}/details/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['status'], ShipmentStatus.PENDING)
        self.assertEqual(len(response.data['data']['packages']), 1)


class DeliveryApiTest(APITestCase):
    """Test pickup verification endpoints."""

    def setUp(self):
        self.customer = make_customer('kofi', 'VC-007')
        self.staff = make_staff()
        self.package = advance_to_arrived(intake(self.customer, self.staff), self.staff, code='482193')

    def verify(self, code, package=None):
        return self.client.post('/api/delivery/verify/', {
            'package': package or self.package.package_id,
            'suite_number': 'VC-007',
            'auth_code': code,
        }, format='json')

    def test_verify_failure_and_success(self):
        self.client.force_authenticate(self.staff)

        response = self.verify('000000')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error']['code'], 'INVALID_CODE')
        self.assertTrue(response.data['error']['details']['attempts_logged'])

        response = self.verify('482193')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['data']['verified'])

        response = self.client.get('/api/verification-logs/')
        self.assertEqual(len(response.data['results']), 2)

    def test_verify_unknown_package(self):
        self.client.force_authenticate(self.staff)
        response = self.verify('482193', package='PKG000000')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_customer_cannot_verify(self):
        self.client.force_authenticate(self.customer)
        response = self.verify('482193')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_my_codes(self):
        self.client.force_authenticate(self.customer)
        response = self.client.get('/api/delivery/my_codes/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data'][0]['delivery_code'], '482193')

    def test_mark_notification_read(self):
        notification = Notification.objects.get(recipient=self.customer)

        self.client.force_authenticate(self.customer)
        response = self.client.post(f'/api/notifications/{notification.id}/mark_read/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        notification.refresh_from_db()
        self.assertTrue(notification.is_read)
