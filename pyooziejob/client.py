import requests
import logging
from requests.auth import HTTPBasicAuth
import sys
import os
import argparse

from pyooziejob.errors import JobError, ConfigurationError

def verbose_log(function):
   def wrapper(self,*args,**kwargs):
      r = function(self,*args,**kwargs)
      if self.verbose:
         logger = logging.getLogger(__name__)
         logger.debug('{} {} -> {}'.format(r.request.method,r.request.url,r.status_code))
         for key in r.request.headers:
            value = r.request.headers[key]
            logger.debug('{}: {}'.format(key,value))
      return r
   return wrapper

_jsonType = 'application/json'

def response_data(req):
   contentType = req.headers.get('Content-Type')
   majorType = contentType[0:contentType.find('/')] if contentType is not None else 'application'
   if contentType is None:
      data = None
   elif contentType[0:len(_jsonType)]==_jsonType:
      try:
         data = req.json()
      except ValueError:
         data = req.text
   elif majorType=='image' or majorType=='application':
      data = req.content
   else:
      data = req.text
   return data


class ServiceError(JobError):
   """Raised when a service interaction does not return a successful status code"""
   def __init__(self,status_code,message,request=None):
      super().__init__(message)
      self.status_code = status_code
      self.request = request
      self.data = response_data(request) if request is not None else None

   def __str__(self):
      return '{} (status {})'.format(self.message,self.status_code)


class Client:
   """A REST client for one service with a lazily created, reused HTTP session."""

   def __init__(self,service='',secure=False,host=None,port=None,username=None,password=None,**extrakeywords):
      self.service = service
      self.secure = secure
      self.host = host
      self.port = port
      self.username = username
      self.password = password
      self.headers = {}
      self.proxies = None
      self.verify = True
      self.verbose = False
      self.progress = False
      self._session = None

   def enable_verbose(self):
      self.verbose = True
      # You must initialize logging, otherwise you'll not see debug output.
      logging.basicConfig()
      logging.getLogger().setLevel(logging.DEBUG)
      requests_log = logging.getLogger("urllib3")
      requests_log.setLevel(logging.DEBUG)
      requests_log.propagate = True

   def service_url(self,version='v1'):
      if not self.host:
         raise ConfigurationError('No host has been configured for the {} service.'.format(self.service))
      protocol = 'https' if self.secure else 'http'
      if self.port is None:
         return '{}://{}/{}/{}'.format(protocol,self.host,self.service,version)
      return '{}://{}:{}/{}/{}'.format(protocol,self.host,self.port,self.service,version)

   def auth(self):
      return HTTPBasicAuth(self.username,self.password) if self.username is not None and self.password is not None else None

   def session(self):
      if self._session is None:
         logging.getLogger(__name__).debug('Creating session for {}'.format(self.service))
         self._session = requests.Session()
         self._session.headers.update(self.headers)
      return self._session

   def close(self):
      if self._session is not None:
         self._session.close()
         self._session = None

   def __enter__(self):
      return self

   def __exit__(self,exc_type,exc_value,traceback):
      self.close()
      return False

   @verbose_log
   def post(self,url,params=None,data=None,headers=None,allow_redirects=True):
      return self.session().post(
         url,
         params=params,
         auth=self.auth(),
         data=data,
         headers=headers,
         allow_redirects=allow_redirects,
         proxies=self.proxies,
         verify=self.verify)

   @verbose_log
   def put(self,url,params=None,data=None,headers=None,allow_redirects=True):
      return self.session().put(
         url,
         params=params,
         auth=self.auth(),
         data=data,
         headers=headers,
         allow_redirects=allow_redirects,
         proxies=self.proxies,
         verify=self.verify)

   @verbose_log
   def get(self,url,params=None,allow_redirects=True,stream=False):
      return self.session().get(
         url,
         params=params,
         auth=self.auth(),
         allow_redirects=allow_redirects,
         stream=stream,
         proxies=self.proxies,
         verify=self.verify)

def parse_auth(value):
   if value is None or len(value)==0:
      return (None,None)
   else:
      colon = value.find(':')
      if colon<0:
         return (value,None)
      else:
         return (value[0:colon],value[colon+1:])

def parse_host(value,default_port=None):
   if value is None or len(value)==0:
      return (None,default_port)
   else:
      colon = value.find(':')
      if colon<0:
         return (value,default_port)
      else:
         return (value[0:colon],int(value[colon+1:]))

def environ_flag(name):
   value = os.environ.get(name)
   return value=='True' or value=='true'

def parse_args(*params,**kwargs):
   if params is None or len(params)==0:
      params = sys.argv[1:]
   elif len(params)==1 and type(params[0])==list:
      params = params[0]

   parser = argparse.ArgumentParser(prog=kwargs.get('prog'),description=kwargs.get('description'))

   parser.add_argument(
        '--oozie',
        nargs="?",
        metavar=('host[:port]'),
        help="The Oozie server (may include port)")
   parser.add_argument(
        '--httpfs',
        nargs="?",
        metavar=('host[:port]'),
        help="The HttpFS gateway used to stage files (may include port)")
   parser.add_argument(
        '--httpfs-user',
        dest='httpfs_user',
        nargs="?",
        help="The user name sent to the HttpFS gateway")
   parser.add_argument(
        '--secure',
        action='store_true',
        default=False,
        help="Use TLS transport (https)")
   parser.add_argument(
      '--auth',
       help="The authentication for the request (colon separated username/password)")
   parser.add_argument(
      '--proxy',
      dest='proxies',
      action='append',
      metavar=('protocol','url'),
      nargs=2,
      help="A protocol proxy")
   parser.add_argument(
      '--no-verify',
      dest='verify',
      action='store_false',
      default=True,
      help="Do not verify SSL certificates")
   parser.add_argument(
      '--lenient',
      dest='strict',
      action='store_false',
      default=True,
      help="Return response bodies without checking the HTTP status")
   parser.add_argument(
      '-v','--verbose',
      dest='verbose',
      action='store_true',
      default=False,
      help="Output detailed information about the request and response")
   parser.add_argument(
      '-i','--progress-information',
      dest='progress',
      action='store_true',
      default=False,
      help="Output progress information about the operations")

   argument_specs = kwargs.get('arguments')
   if argument_specs is not None:
      for spec in argument_specs:
         if type(spec)==str:
            parser.add_argument(spec)
         else:
            a = []
            for n in spec:
               if type(n)==str:
                  a.append(n)
            parser.add_argument(*a,**spec[-1])

   args = parser.parse_args(params)

   check_env = kwargs.get('disable_environ')
   if check_env is None or not check_env:
      if args.oozie is None:
         args.oozie = os.environ.get('OOZIE_HOST')
         if args.oozie is not None and os.environ.get('OOZIE_PORT') is not None:
            args.oozie = '{}:{}'.format(args.oozie,os.environ.get('OOZIE_PORT'))
      if args.httpfs is None:
         args.httpfs = os.environ.get('HTTPFS_HOST')
         if args.httpfs is not None and os.environ.get('HTTPFS_PORT') is not None:
            args.httpfs = '{}:{}'.format(args.httpfs,os.environ.get('HTTPFS_PORT'))
      if args.httpfs_user is None:
         args.httpfs_user = os.environ.get('HTTPFS_USER')
      if args.auth is None:
         args.auth = os.environ.get('OOZIE_AUTH')
      if args.proxies is None:
         http_proxy = os.environ.get('OOZIE_PROXY_HTTP')
         https_proxy = os.environ.get('OOZIE_PROXY_HTTPS')
         if http_proxy is not None:
            args.proxies = [('http',http_proxy)]
         if https_proxy is not None:
            if args.proxies is None:
               args.proxies = [('https',https_proxy)]
            else:
               args.proxies.append(('https',https_proxy))
      if '--no-verify' not in params and 'OOZIE_VERIFY' in os.environ:
         args.verify = environ_flag('OOZIE_VERIFY')
      if '--secure' not in params and 'OOZIE_SECURE' in os.environ:
         args.secure = environ_flag('OOZIE_SECURE')

   if args.proxies is not None:
      pdict = {}
      for pdef in args.proxies:
         pdict[pdef[0]] = pdef[1]
      args.proxies = pdict

   args.user = parse_auth(args.auth)

   return args
