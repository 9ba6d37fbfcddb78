"""
Tests for CMI history persistence, resumed sessions and the debug logger
"""
from datetime import timedelta
from io import StringIO

from django.core.cache import cache
from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase, override_settings
from django.utils import timezone

from .api_handler import ScormAPIHandler
from .debug_logger import ScormDebugLogger
from .history import CmiHistoryStore
from .models import CmiHistoryEntry


class CmiHistoryStoreTestCase(TestCase):

    def setUp(self):
        self.store = CmiHistoryStore('course-1:learner-7')

    def test_history_key_required(self):
        with self.assertRaises(ValueError):
            CmiHistoryStore('')

    def test_empty_history(self):
        self.assertIsNone(self.store.last())
        self.assertEqual(self.store.entries(), [])
        self.assertEqual(len(self.store), 0)

    def test_append(self):
        self.store.append({'location': 'p1'})
        self.store.append({'location': 'p2'})
        self.assertEqual(len(self.store), 2)
        self.assertEqual(self.store.last()['cmi'], {'location': 'p2'})
        self.assertEqual([entry['cmi']['location'] for entry in self.store.entries()], ['p1', 'p2'])

    def test_entries_are_ordered_by_timestamp(self):
        now = timezone.now()
        self.store.append({'location': 'late'}, timestamp=now)
        self.store.append({'location': 'early'}, timestamp=now - timedelta(minutes=5))
        self.assertEqual(self.store.last()['cmi']['location'], 'late')
        self.assertEqual(self.store.entries()[0]['cmi']['location'], 'early')
        self.assertEqual(self.store.last()['timestamp'], now.isoformat())

    def test_keys_are_isolated(self):
        self.store.append({'location': 'p1'})
        self.assertIsNone(CmiHistoryStore('course-1:learner-8').last())

    def test_model_str(self):
        entry = self.store.append({})
        self.assertTrue(str(entry).startswith('course-1:learner-7 @ '))


class PersistTestCase(TestCase):

    def test_commit_and_terminate_store_snapshots(self):
        api = ScormAPIHandler(history_key='course-1:learner-7')
        api.Initialize('')
        api.SetValue('cmi.location', 'p4')
        with self.assertLogs('scorm.signals', level='INFO'):
            api.Commit('')
        api.SetValue('cmi.exit', 'suspend')
        api.Terminate('')

        store = CmiHistoryStore('course-1:learner-7')
        self.assertEqual(len(store), 2)
        self.assertEqual(store.entries()[0]['cmi']['location'], 'p4')
        self.assertIsNone(store.entries()[0]['cmi']['exit'])
        self.assertEqual(store.last()['cmi']['exit'], 'suspend')

    def test_handler_without_history_key(self):
        api = ScormAPIHandler()
        api.Initialize('')
        api.Terminate('')
        self.assertEqual(CmiHistoryEntry.objects.count(), 0)

    @override_settings(SCORM_PERSIST_HISTORY=False)
    def test_history_disabled(self):
        api = ScormAPIHandler(history_key='course-1:learner-7')
        api.Initialize('')
        api.Terminate('')
        self.assertEqual(CmiHistoryEntry.objects.count(), 0)

    def test_failed_commit_stores_nothing(self):
        api = ScormAPIHandler(history_key='course-1:learner-7')
        api.Commit('')
        self.assertEqual(api.GetLastError(), '142')
        self.assertEqual(CmiHistoryEntry.objects.count(), 0)


class FromHistoryTestCase(TestCase):

    key = 'course-1:learner-7'

    def finish_session(self, exit_value, location='p9'):
        api = ScormAPIHandler.from_history(self.key)
        api.Initialize('')
        api.SetValue('cmi.location', location)
        api.SetValue('cmi.session_time', 'PT10M')
        api.SetValue('cmi.exit', exit_value)
        api.Terminate('')
        return api

    def test_first_session(self):
        api = ScormAPIHandler.from_history(self.key)
        api.Initialize('')
        self.assertEqual(api.GetValue('cmi.entry'), 'ab-initio')
        self.assertEqual(api.history_key, self.key)

    def test_resume_after_suspend(self):
        self.finish_session('suspend')
        api = ScormAPIHandler.from_history(self.key)
        api.Initialize('')
        self.assertEqual(api.GetValue('cmi.entry'), 'resume')
        self.assertEqual(api.GetValue('cmi.location'), 'p9')
        self.assertEqual(api.GetValue('cmi.total_time'), 'PT0H10M0S')

    def test_total_time_accumulates_across_resumes(self):
        self.finish_session('suspend')
        self.finish_session('suspend')
        api = ScormAPIHandler.from_history(self.key)
        api.Initialize('')
        self.assertEqual(api.GetValue('cmi.total_time'), 'PT0H20M0S')

    def test_new_attempt_after_logout(self):
        self.finish_session('logout')
        api = ScormAPIHandler.from_history(self.key)
        api.Initialize('')
        self.assertEqual(api.GetValue('cmi.entry'), 'ab-initio')
        self.assertEqual(api.GetValue('cmi.location'), '')
        self.assertEqual(api.GetLastError(), '403')
        self.assertEqual(api.GetValue('cmi.total_time'), 'PT0H0M0S')

    def test_suspend_all(self):
        self.finish_session('')
        api = ScormAPIHandler.from_history(self.key, suspend_all=True)
        api.Initialize('')
        self.assertEqual(api.GetValue('cmi.entry'), 'resume')

    def test_lms_data_is_carried(self):
        CmiHistoryStore(self.key).append({'learner_name': 'Ada', 'credit': 'no-credit', 'exit': 'logout'})
        api = ScormAPIHandler.from_history(self.key)
        api.Initialize('')
        self.assertEqual(api.GetValue('cmi.learner_name'), 'Ada')
        self.assertEqual(api.GetValue('cmi.credit'), 'no-credit')


class ShowCmiHistoryCommandTestCase(TestCase):

    def setUp(self):
        store = CmiHistoryStore('course-1:learner-7')
        store.append({'location': 'p1'})
        store.append({'location': 'p2'})

    def test_latest_snapshot(self):
        out = StringIO()
        call_command('show_cmi_history', 'course-1:learner-7', stdout=out)
        output = out.getvalue()
        self.assertIn('"location": "p2"', output)
        self.assertNotIn('"location": "p1"', output)
        self.assertIn('1 snapshot(s) of 2 stored', output)

    def test_all_snapshots(self):
        out = StringIO()
        call_command('show_cmi_history', 'course-1:learner-7', '--all', stdout=out)
        output = out.getvalue()
        self.assertLess(output.index('"location": "p1"'), output.index('"location": "p2"'))
        self.assertIn('2 snapshot(s) of 2 stored', output)

    def test_unknown_key(self):
        with self.assertRaises(CommandError):
            call_command('show_cmi_history', 'course-2:learner-7', stdout=StringIO())


@override_settings(SCORM_DEBUG_LOGGING=True)
class DebugLoggerTestCase(TestCase):

    def setUp(self):
        cache.clear()
        self.api = ScormAPIHandler(history_key='course-1:learner-7')
        self.debug_logger = ScormDebugLogger(self.api.session_id, self.api.history_key)

    def test_calls_are_recorded(self):
        self.api.Initialize('')
        self.api.SetValue('cmi.location', 'p1')

        call = self.debug_logger.get_last_call('SetValue')
        self.assertEqual(call['parameters'], ['cmi.location', 'p1'])
        self.assertEqual(call['result'], 'true')
        self.assertIsNone(call['error_code'])
        self.assertEqual(call['history_key'], 'course-1:learner-7')

    def test_failed_calls_are_warnings(self):
        self.api.Initialize('')
        with self.assertLogs('scorm.debug_logger', level='WARNING') as logs:
            self.api.GetValue('cmi.suspend_data')
        self.assertIn('403', logs.output[0])
        self.assertEqual(self.debug_logger.get_last_call('GetValue')['error_code'], '403')

    def test_summary(self):
        self.api.Initialize('')
        self.api.GetValue('cmi.mode')
        self.api.Commit('')

        summary = self.debug_logger.get_debug_summary()
        self.assertEqual([call['method'] for call in summary['api_calls']], ['Initialize', 'GetValue', 'Commit'])
        self.assertIn('location', summary['persist']['elements'])

    def test_clear(self):
        self.api.Initialize('')
        self.api.Commit('')
        self.debug_logger.clear_debug_data()
        self.assertIsNone(self.debug_logger.get_last_call('Initialize'))
        self.assertIsNone(self.debug_logger.get_last_persist())
