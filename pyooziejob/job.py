from pyooziejob.client import Client, ServiceError
from pyooziejob.webhdfs import WebHDFS, HTTPFS_PORT
from pyooziejob.properties import PROJECT_ROOT, MappingProperties, FileProperties, RawXMLProperties, properties_source
from pyooziejob.errors import PropertiesReadError, FileAttachError, StagingUploadError, SubmissionError, StatusParseError, JobError
import requests
import getpass
import logging
import json
import os

OOZIE_PORT = 11000
_xmlType = 'application/xml;charset=UTF-8'

class StagingOutcome:
   """The result of staging one attached file."""

   def __init__(self,local_path,remote_path,error=None):
      self.local_path = local_path
      self.remote_path = remote_path
      self.error = error

   @property
   def ok(self):
      return self.error is None

   def __repr__(self):
      return 'StagingOutcome({!r}, {!r}, ok={})'.format(self.local_path,self.remote_path,self.ok)


class OozieJob(Client):
   """Configures, submits, starts and inquires the status of remote Oozie jobs.

   Files attached with :meth:`add_files` are uploaded through an HttpFS
   gateway into ``oozie_project_root`` when the job is submitted. The client
   does not remember the jobs it submits; keep the returned job ids.

   With ``strict`` (the default) a REST response without a 2xx status raises
   :class:`ServiceError`. Otherwise the response body is returned whatever
   the status.
   """

   def __init__(self,oozie_host=None,oozie_port=OOZIE_PORT,httpfs_host=None,httpfs_port=HTTPFS_PORT,httpfs_user=None,properties=None,oozie_project_root=None,strict=True,**kwargs):
      super().__init__(service='oozie',host=oozie_host,port=oozie_port,**kwargs)
      self.headers['Content-Type'] = _xmlType
      self.httpfs_host = httpfs_host
      self.httpfs_port = httpfs_port
      self.httpfs_user = httpfs_user
      self.oozie_project_root = oozie_project_root
      self.strict = strict
      self.files = []
      self.last_staging = []
      self._properties = properties_source(properties)

   @property
   def oozie_host(self):
      return self.host

   @oozie_host.setter
   def oozie_host(self,value):
      self.host = value

   @property
   def oozie_port(self):
      return self.port

   @oozie_port.setter
   def oozie_port(self,value):
      self.port = value

   @property
   def properties(self):
      return self._properties

   @properties.setter
   def properties(self,value):
      self._properties = properties_source(value)

   def use_mapping(self,mapping):
      self._properties = MappingProperties(mapping)

   def use_file(self,path):
      self._properties = FileProperties(path)

   def use_xml(self,xml):
      self._properties = RawXMLProperties(xml)

   def serialize_properties(self):
      if self._properties is None:
         raise PropertiesReadError('No job properties have been set.')
      xml = self._properties.to_xml()
      root = self._properties.project_root()
      if root is not None:
         self.oozie_project_root = root
      return xml

   def add_files(self,*paths):
      """Attaches local files to be staged on submission.

      Paths that are not regular files are dropped with a warning; the
      rejections are returned.
      """
      logger = logging.getLogger(__name__)
      rejected = []
      for path in paths:
         if not os.path.isfile(path):
            logger.warning('{} does not exist as a file, ignoring'.format(path))
            rejected.append(FileAttachError('{} does not exist as a file'.format(path),path))
            continue
         self.files.append(path)
      return rejected

   def httpfs_user_name(self):
      if self.httpfs_user is not None:
         return self.httpfs_user
      try:
         return getpass.getuser()
      except (OSError,KeyError) as err:
         logging.getLogger(__name__).warning('Cannot determine the local user, sending no user.name: {}'.format(err))
         return None

   def create_hdfs_client(self):
      webhdfs = WebHDFS(host=self.httpfs_host,port=self.httpfs_port,user_name=self.httpfs_user_name(),secure=self.secure)
      webhdfs.proxies = self.proxies
      webhdfs.verify = self.verify
      if self.verbose:
         webhdfs.enable_verbose()
      return webhdfs

   def stage_files(self):
      """Uploads the attached files into the project root, one at a time.

      A file that cannot be read or uploaded is logged and skipped. Returns a
      :class:`StagingOutcome` per attached file, in attachment order.
      """
      logger = logging.getLogger(__name__)
      root = self.oozie_project_root if self.oozie_project_root is not None else ''
      if not root:
         logger.warning('No oozie_project_root; set it or give {} in the properties first'.format(PROJECT_ROOT))
      outcomes = []
      with self.create_hdfs_client() as hdfs:
         for local_path in self.files:
            remote_path = '{}/{}'.format(root,os.path.basename(local_path))
            try:
               with open(local_path,'rb') as data:
                  content = data.read()
            except OSError as err:
               logger.warning('Error reading file {}: {}'.format(local_path,err))
               outcomes.append(StagingOutcome(local_path,remote_path,StagingUploadError('Cannot read {}: {}'.format(local_path,err),local_path,remote_path)))
               continue
            logger.debug('Uploading {} to {}'.format(local_path,remote_path))
            if self.progress:
               logger.info('{} → {}'.format(local_path,remote_path))
            try:
               hdfs.copy(content,remote_path,size=len(content),overwrite=True)
            except (JobError,requests.RequestException) as err:
               logger.warning('Cannot create HDFS file {}: {}'.format(remote_path,err))
               outcomes.append(StagingOutcome(local_path,remote_path,StagingUploadError('Cannot create {}: {}'.format(remote_path,err),local_path,remote_path)))
               continue
            outcomes.append(StagingOutcome(local_path,remote_path))
      self.last_staging = outcomes
      return outcomes

   def _body(self,req,message):
      if self.strict and (req.status_code<200 or req.status_code>=300):
         raise ServiceError(req.status_code,message,request=req)
      return req.text

   def _rest_get(self,job_id,**params):
      if not job_id:
         return None
      url = '{}/job/{}'.format(self.service_url(),job_id)
      logging.getLogger(__name__).debug('GET {} {}'.format(url,params))
      req = self.get(url,params=params)
      return self._body(req,'Cannot get job information for {}'.format(job_id))

   def _rest_post(self,body):
      if not body:
         return None
      url = '{}/jobs'.format(self.service_url())
      data = body.encode('utf-8') if type(body)==str else body
      logging.getLogger(__name__).debug('POST {} bytes to {}'.format(len(data),url))
      req = self.post(url,data=data)
      return self._body(req,'Cannot submit job.')

   def _rest_put(self,job_id,action):
      if not job_id or not action:
         return None
      url = '{}/job/{}'.format(self.service_url(),job_id)
      logging.getLogger(__name__).debug('PUT {}?action={}'.format(url,action))
      req = self.put(url,params={'action':action})
      return self._body(req,'Cannot {} job {}'.format(action,job_id))

   def submit(self):
      """Submits the configured job without running it and returns its id."""
      logger = logging.getLogger(__name__)
      xml = self.serialize_properties()
      if len(self.files)>0:
         self.stage_files()
      body = self._rest_post(xml)
      try:
         msg = json.loads(body)
      except (TypeError,ValueError) as err:
         logger.error('Submit failed, cannot parse response: {}'.format(err))
         raise SubmissionError('Cannot parse the submission response: {}'.format(err),body=body) from err
      job_id = msg.get('id') if isinstance(msg,dict) else None
      if not job_id:
         logger.error('Submit failed, no job id in response: {}'.format(body))
         raise SubmissionError('The submission response has no job id.',body=body)
      if self.progress:
         logger.info('{} job submitted.'.format(job_id))
      return job_id

   def start(self,job_id):
      self._rest_put(job_id,'start')

   def suspend(self,job_id):
      self._rest_put(job_id,'suspend')

   def resume(self,job_id):
      self._rest_put(job_id,'resume')

   def kill(self,job_id):
      self._rest_put(job_id,'kill')

   def run(self):
      """Same as :meth:`submit` immediately followed by :meth:`start`."""
      job_id = self.submit()
      self.start(job_id)
      return job_id

   def info(self,job_id):
      if not job_id:
         return None
      body = self._rest_get(job_id,show='info')
      try:
         msg = json.loads(body)
      except (TypeError,ValueError) as err:
         raise StatusParseError('Cannot parse information for job {}: {}'.format(job_id,err),body=body) from err
      if not isinstance(msg,dict):
         raise StatusParseError('The information for job {} is not a JSON object.'.format(job_id),body=body)
      return msg

   def status(self,job_id):
      """Returns the status word of a job: PREP, RUNNING, PAUSED, SUCCEEDED,
      KILLED, FAILED or one of the rarer values Oozie reports."""
      msg = self.info(job_id)
      return msg.get('status') if msg is not None else None
