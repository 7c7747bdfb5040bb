import os
import shutil
import tempfile
import unittest
from unittest import mock

from pyooziejob import OozieJob, ServiceError, ConfigurationError, SubmissionError, StatusParseError
from pyooziejob.webhdfs import WebHDFS
from tests.fakes import FakeOozie, make_response

JOB_ID = '0001-oozie-C'
BASE = 'http://oozie.example.com:11000/oozie/v1'


class AddFilesTestCase(unittest.TestCase):

   def setUp(self):
      self.dir = tempfile.mkdtemp()

   def tearDown(self):
      shutil.rmtree(self.dir)

   def touch(self,name):
      path = os.path.join(self.dir,name)
      with open(path,'w') as out:
         out.write(name)
      return path

   def test_only_existing_files_are_attached(self):
      workflow = self.touch('workflow.xml')
      mapper = self.touch('mapper.py')
      missing = [os.path.join(self.dir,'nope.py'),self.dir]
      client = OozieJob(oozie_host='oozie')
      with self.assertLogs('pyooziejob.job',level='WARNING') as logs:
         rejected = client.add_files(workflow,missing[0],mapper,missing[1])
      self.assertEqual([workflow,mapper],client.files)
      self.assertEqual(missing,[err.path for err in rejected])
      self.assertEqual(2,len(logs.records))

   def test_files_accumulate(self):
      a = self.touch('a.py')
      b = self.touch('b.py')
      client = OozieJob(oozie_host='oozie')
      client.add_files(a)
      client.add_files(b)
      self.assertEqual([a,b],client.files)


class LifecycleTestCase(unittest.TestCase):

   def setUp(self):
      self.client = OozieJob(oozie_host='oozie.example.com',properties={'nameNode':'hdfs://nn'})
      patcher = mock.patch('requests.Session.request')
      self.request = patcher.start()
      self.addCleanup(patcher.stop)

   def serve(self,routes):
      fake = FakeOozie(routes)
      self.request.side_effect = fake
      return fake

   def test_run_submits_then_starts(self):
      fake = self.serve({
         ('POST',BASE+'/jobs') : make_response(201,'{"id":"0001-oozie-C"}'),
         ('PUT',BASE+'/job/'+JOB_ID) : make_response(200,'')
      })
      self.assertEqual(JOB_ID,self.client.run())
      self.assertEqual(['POST','PUT'],[call[0] for call in fake.calls])
      method, url, kwargs = fake.calls[1]
      self.assertEqual(BASE+'/job/'+JOB_ID,url)
      self.assertEqual({'action':'start'},kwargs['params'])

   def test_submit_posts_configuration(self):
      fake = self.serve({('POST',BASE+'/jobs') : make_response(201,'{"id":"0002-oozie-W"}')})
      self.assertEqual('0002-oozie-W',self.client.submit())
      body = fake.calls[0][2]['data'].decode('utf-8')
      self.assertIn('<name>nameNode</name>',body)
      self.assertEqual('application/xml;charset=UTF-8',self.client.session().headers['Content-Type'])

   def test_status(self):
      fake = self.serve({('GET',BASE+'/job/'+JOB_ID) : make_response(200,'{"status":"RUNNING","id":"0001-oozie-C"}')})
      self.assertEqual('RUNNING',self.client.status(JOB_ID))
      self.assertEqual({'show':'info'},fake.calls[0][2]['params'])

   def test_status_is_returned_verbatim(self):
      self.serve({('GET',BASE+'/job/'+JOB_ID) : make_response(200,'{"status":"SUSPENDEDWITHERROR"}')})
      self.assertEqual('SUSPENDEDWITHERROR',self.client.status(JOB_ID))

   def test_info(self):
      self.serve({('GET',BASE+'/job/'+JOB_ID) : make_response(200,'{"status":"SUCCEEDED","appName":"wordcount"}')})
      self.assertEqual({'status':'SUCCEEDED','appName':'wordcount'},self.client.info(JOB_ID))

   def test_actions(self):
      fake = self.serve({('PUT',BASE+'/job/'+JOB_ID) : make_response(200,'')})
      self.client.suspend(JOB_ID)
      self.client.resume(JOB_ID)
      self.client.kill(JOB_ID)
      self.assertEqual(['suspend','resume','kill'],[call[2]['params']['action'] for call in fake.calls])

   def test_unparsable_submission(self):
      self.serve({('POST',BASE+'/jobs') : make_response(200,'<html>oops</html>',content_type='text/html')})
      with self.assertLogs('pyooziejob.job',level='ERROR'):
         with self.assertRaises(SubmissionError) as ctx:
            self.client.submit()
      self.assertEqual('<html>oops</html>',ctx.exception.body)

   def test_submission_without_id(self):
      self.serve({('POST',BASE+'/jobs') : make_response(200,'{"error":"E0701"}')})
      with self.assertLogs('pyooziejob.job',level='ERROR'):
         with self.assertRaises(SubmissionError):
            self.client.submit()

   def test_run_does_not_start_without_id(self):
      fake = self.serve({('POST',BASE+'/jobs') : make_response(200,'{}')})
      with self.assertLogs('pyooziejob.job',level='ERROR'):
         with self.assertRaises(SubmissionError):
            self.client.run()
      self.assertEqual(1,len(fake.calls))

   def test_unparsable_status(self):
      self.serve({('GET',BASE+'/job/'+JOB_ID) : make_response(200,'garbage',content_type='text/plain')})
      with self.assertRaises(StatusParseError) as ctx:
         self.client.status(JOB_ID)
      self.assertEqual('garbage',ctx.exception.body)

   def test_status_not_an_object(self):
      self.serve({('GET',BASE+'/job/'+JOB_ID) : make_response(200,'["RUNNING"]')})
      with self.assertRaises(StatusParseError):
         self.client.status(JOB_ID)

   def test_strict_raises_on_error_status(self):
      self.serve({('GET',BASE+'/job/'+JOB_ID) : make_response(500,'internal error',content_type='text/plain')})
      with self.assertRaises(ServiceError) as ctx:
         self.client.status(JOB_ID)
      self.assertEqual(500,ctx.exception.status_code)
      self.assertEqual('internal error',ctx.exception.data)

   def test_lenient_returns_body(self):
      self.client.strict = False
      self.serve({('PUT',BASE+'/job/'+JOB_ID) : make_response(400,'bad action',content_type='text/plain')})
      self.assertEqual('bad action',self.client._rest_put(JOB_ID,'start'))

   def test_empty_arguments_do_not_touch_network(self):
      self.assertIsNone(self.client._rest_get('',show='info'))
      self.assertIsNone(self.client._rest_post(''))
      self.assertIsNone(self.client._rest_put(None,'start'))
      self.assertIsNone(self.client._rest_put(JOB_ID,''))
      self.client.start(None)
      self.assertIsNone(self.client.status(''))
      self.request.assert_not_called()

   def test_missing_host(self):
      client = OozieJob(properties={'a':'b'})
      with self.assertRaises(ConfigurationError):
         client.status(JOB_ID)
      self.request.assert_not_called()

   def test_session_is_reused(self):
      self.serve({
         ('GET',BASE+'/job/'+JOB_ID) : make_response(200,'{"status":"PREP"}'),
         ('PUT',BASE+'/job/'+JOB_ID) : make_response(200,'')
      })
      self.client.status(JOB_ID)
      session = self.client._session
      self.client.start(JOB_ID)
      self.client.status(JOB_ID)
      self.assertIsNotNone(session)
      self.assertIs(session,self.client._session)

   def test_close(self):
      with self.client as client:
         client.session()
      self.assertIsNone(self.client._session)

   def test_host_and_port_aliases(self):
      client = OozieJob()
      client.oozie_host = 'other'
      client.oozie_port = 12000
      self.assertEqual('http://other:12000/oozie/v1',client.service_url())

   def test_secure_service_url(self):
      client = OozieJob(oozie_host='oozie.example.com',secure=True)
      self.assertEqual('https://oozie.example.com:11000/oozie/v1',client.service_url())
      client.oozie_port = None
      self.assertEqual('https://oozie.example.com/oozie/v1',client.service_url())


class SubmitWithFilesTestCase(unittest.TestCase):

   def setUp(self):
      self.dir = tempfile.mkdtemp()
      self.path = os.path.join(self.dir,'workflow.xml')
      with open(self.path,'w') as out:
         out.write('<workflow-app/>')

   def tearDown(self):
      shutil.rmtree(self.dir)

   def test_files_are_staged_before_post(self):
      events = []
      def copy(hdfs,data,path,size=-1,overwrite=False):
         events.append(('copy',path))
         return True
      def request(method,url,**kwargs):
         events.append((method,url))
         return make_response(201,'{"id":"0003-oozie-W"}')
      client = OozieJob(
         oozie_host='oozie.example.com',
         httpfs_host='httpfs.example.com',
         httpfs_user='martin',
         properties={'oozieProjectRoot':'/user/martin/app'})
      client.add_files(self.path)
      with mock.patch.object(WebHDFS,'copy',autospec=True,side_effect=copy), \
           mock.patch('requests.Session.request',side_effect=request):
         self.assertEqual('0003-oozie-W',client.submit())
      self.assertEqual([('copy','/user/martin/app/workflow.xml'),('POST',BASE+'/jobs')],events)

   def test_staging_failure_does_not_block_submission(self):
      client = OozieJob(
         oozie_host='oozie.example.com',
         httpfs_host='httpfs.example.com',
         httpfs_user='martin',
         properties={'oozieProjectRoot':'/user/martin/app'})
      client.add_files(self.path)
      with mock.patch.object(WebHDFS,'copy',side_effect=ServiceError(403,'Forbidden')), \
           mock.patch('requests.Session.request',return_value=make_response(201,'{"id":"0004-oozie-W"}')):
         with self.assertLogs('pyooziejob.job',level='WARNING'):
            self.assertEqual('0004-oozie-W',client.submit())
      self.assertEqual(1,len(client.last_staging))
      self.assertFalse(client.last_staging[0].ok)

   def test_properties_file_is_posted_unchanged(self):
      content = '<?xml version="1.0" encoding="ISO-8859-1"?>\n<configuration><property><name>place</name><value>café</value></property></configuration>\n'.encode('iso-8859-1')
      path = os.path.join(self.dir,'config.xml')
      with open(path,'wb') as out:
         out.write(content)
      client = OozieJob(oozie_host='oozie.example.com',properties=path)
      fake = FakeOozie({('POST',BASE+'/jobs') : make_response(201,'{"id":"0005-oozie-W"}')})
      with mock.patch('requests.Session.request',side_effect=fake):
         self.assertEqual('0005-oozie-W',client.submit())
      self.assertEqual(content,fake.calls[0][2]['data'])


if __name__ == '__main__':
   unittest.main()
